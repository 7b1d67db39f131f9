"""Role catalogue used for coarse authorization scopes."""

from __future__ import annotations

import enum

from sqlalchemy import Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from mercury.core.extensions import db

from .base import PKMixin, ReprMixin


class RoleName(enum.Enum):
    """Symbolic role names; the member name is what tokens carry as ``scope``."""

    ADMIN = 1
    STAFF = 2
    SELLER = 3
    MEMBER = 4


class Role(PKMixin, ReprMixin, db.Model):
    """
    Read-only reference row describing an account role.

    Fields
    ------
    id : int
        Stable role id (``4`` is the regular member role).
    role_name : RoleName
        Symbolic name, stored as the enum member name.
    """

    __tablename__ = "roles"
    __repr_attrs__ = ("id", "role_name")

    role_name: Mapped[RoleName] = mapped_column(
        Enum(RoleName, name="role_name", native_enum=False, length=20),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("role_name", name="uq_roles_role_name"),)
