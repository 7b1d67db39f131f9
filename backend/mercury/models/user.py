"""Account model for the storefront."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from mercury.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .role import Role


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity.

    Fields
    ------
    user_name : str
        Login handle. Unique, non-empty.
    email : str
        Contact email. Unique; compared by exact equality.
    phone : str
        Contact phone. Unique; compared by exact equality.
    password_hash : str
        bcrypt hash; never the raw password.
    full_name : str | None
        Optional profile field.
    address : str | None
        Optional profile field.
    status : bool
        Activation flag. ``False`` until an activation flow flips it.
    role_id : int | None
        Foreign key to :class:`~mercury.models.role.Role`.
    """

    __tablename__ = "users"
    __repr_attrs__ = ("id", "user_name")

    # Columns
    user_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(60), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    role_id: Mapped[int | None] = mapped_column(ForeignKey("roles.id"), nullable=True)

    role: Mapped[Role | None] = relationship(Role, lazy="joined")

    # Unique constraints double as the lookup indexes
    __table_args__ = (
        UniqueConstraint("user_name", name="uq_users_user_name"),
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("phone", name="uq_users_phone"),
    )

    @property
    def scope(self) -> str:
        """Role symbolic name embedded in tokens, or ``""`` without a role."""
        return self.role.role_name.name if self.role is not None else ""

    # -------------------- Validators --------------------
    @validates("user_name", "email", "phone")
    def _require_identifier(self, key: str, value: str) -> str:
        """
        Trim identifiers and reject blanks.

        :param key: Field name.
        :type key: str
        :param value: Raw value.
        :type value: str
        :returns: Trimmed value.
        :rtype: str
        :raises ValueError: If the value is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
