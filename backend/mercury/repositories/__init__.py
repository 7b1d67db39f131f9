"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from mercury.repositories.account import AccountRepository
from mercury.repositories.base import BaseRepository
from mercury.repositories.role import RoleRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "RoleRepository",
]
