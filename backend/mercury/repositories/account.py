"""Account repository: persistence and identifier lookups for :class:`User`."""

from __future__ import annotations

from sqlalchemy import or_, select

from mercury.models.user import User
from mercury.repositories.base import BaseRepository


class AccountRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes passwords or issues tokens; only DB-level account
    management.
    """

    model = User

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {
            "user_name": User.user_name,
            "email": User.email,
            "phone": User.phone,
        }

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email."""
        return self.find_one(email=email)

    def get_by_phone(self, phone: str) -> User | None:
        """Fetch a user by exact phone number."""
        return self.find_one(phone=phone)

    def get_by_user_name(self, user_name: str) -> User | None:
        """Fetch a user by exact user name."""
        return self.find_one(user_name=user_name)

    def exists_by_email(self, email: str) -> bool:
        return self.exists(email=email)

    def exists_by_phone(self, phone: str) -> bool:
        return self.exists(phone=phone)

    def exists_by_user_name(self, user_name: str) -> bool:
        return self.exists(user_name=user_name)

    def find_by_identifier(self, identifier: str) -> User | None:
        """Fetch the account whose user name, email *or* phone equals ``identifier``.

        Each column is compared with ``=``; wildcard characters in
        ``identifier`` have no special meaning. Rows are ordered by id so the
        result is deterministic if the value collides across columns of
        different accounts.

        :param identifier: Value typed into the single login field.
        :type identifier: str
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        stmt = (
            select(User)
            .where(
                or_(
                    User.user_name == identifier,
                    User.email == identifier,
                    User.phone == identifier,
                )
            )
            .order_by(User.id.asc())
        )
        return self._first(stmt)
