"""Shared persistence helpers for the account repositories.

Repositories only read and stage rows. Transactions belong to the unit of
work, so nothing here commits or rolls back.

Lookups compile to ``column = :value`` and never to ``LIKE``: identifiers
containing ``%`` or ``_`` match literally.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from mercury.core.extensions import db

M = TypeVar("M")


class BaseRepository(Generic[M]):
    """
    Persistence-only access to one mapped class.

    Subclasses set :attr:`model` and list the columns callers may filter on
    in :meth:`_filterable_fields`.

    :param session: Session owned by the surrounding unit of work; defaults
        to the Flask-scoped session.
    :type session: sqlalchemy.orm.Session | None
    """

    model: ClassVar[type[Any]]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else db.session

    # ------------------------------ Hooks ------------------------------------

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Public filter name -> column. Empty by default."""
        return {}

    # ------------------------------ Internals --------------------------------

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        """
        Narrow ``stmt`` by ``column = value`` for each whitelisted filter.

        :raises ValueError: If ``filters`` is empty or names a column that is
            not in :meth:`_filterable_fields`.
        """
        if not filters:
            raise ValueError("At least one equality filter is required.")
        columns = self._filterable_fields()
        rejected = sorted(set(filters) - set(columns))
        if rejected:
            raise ValueError(f"Unknown or non-filterable fields: {rejected}")
        return stmt.where(*(columns[name] == value for name, value in filters.items()))

    def _first(self, stmt: Select[Any]) -> M | None:
        return self.session.execute(stmt).scalars().first()

    # ------------------------------ Queries ----------------------------------

    def get(self, entity_id: Any) -> M | None:
        """Return the row whose primary key is ``entity_id``, or ``None``."""
        return self._first(select(self.model).where(self.model.id == entity_id))

    def find_one(self, **filters: Any) -> M | None:
        """Return the first row matching every equality filter, or ``None``."""
        return self._first(self._where(select(self.model), filters))

    def exists(self, **filters: Any) -> bool:
        """Count matches without loading rows."""
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        return bool(self.session.execute(stmt).scalar())

    # ------------------------------ Staging ----------------------------------

    def add(self, instance: M) -> M:
        """
        Stage ``instance`` and flush so its primary key is assigned.

        Unique-constraint violations surface here as
        :class:`sqlalchemy.exc.IntegrityError`.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()
