"""Unit of Work contract shared by the account use-cases."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mercury.repositories import AccountRepository, RoleRepository


class UnitOfWork(ABC):
    """
    One transactional boundary around ``accounts`` and ``roles``.

    Implementations decide what leaving the ``with`` block means: the
    read-write flavour commits on success, the read-only flavour always
    rolls back. Any exception, including ``BaseException`` subclasses raised
    on cancellation, must leave the store untouched.
    """

    accounts: AccountRepository
    roles: RoleRepository

    def __enter__(self) -> UnitOfWork:
        return self

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
