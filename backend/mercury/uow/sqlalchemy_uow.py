"""SQLAlchemy units of work over the Flask-scoped session."""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session

from mercury.core.extensions import db
from mercury.repositories import AccountRepository, RoleRepository
from mercury.uow.base import UnitOfWork


class _SessionBound(UnitOfWork):
    """Bind ``accounts`` and ``roles`` to one session."""

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session = session or db.session
        self.accounts = AccountRepository(session=self.session)
        self.roles = RoleRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionBound):
    """
    Read-write unit of work: commit on a clean exit, roll back otherwise.

    ``BaseException`` counts as failure too, so a request cancelled mid-way
    (``KeyboardInterrupt``, ``GeneratorExit``, worker timeouts) leaves no
    partial rows behind.
    """

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except BaseException:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class SQLAlchemyReadOnlyUnitOfWork(_SessionBound):
    """
    Read-only unit of work used by login.

    * A ``before_flush`` guard rejects any pending insert, update or delete.
    * Exiting always rolls back.
    * :meth:`commit` raises.
    """

    _guarded = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", self._reject_writes)
        self._guarded = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if self._guarded:
                with suppress(Exception):
                    event.remove(self.session, "before_flush", self._reject_writes)
                self._guarded = False

    @staticmethod
    def _reject_writes(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: flush blocked, pending writes present.")

    def commit(self) -> None:
        """
        :raises RuntimeError: always; read-only units never commit.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")
