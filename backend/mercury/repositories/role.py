"""Role repository (read-mostly reference data)."""

from __future__ import annotations

from mercury.models.role import Role, RoleName
from mercury.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Persistence-only repository for :class:`Role`."""

    model = Role

    def _filterable_fields(self):
        return {"role_name": Role.role_name}

    def get_by_name(self, role_name: RoleName) -> Role | None:
        """Fetch a role by its symbolic name."""
        return self.find_one(role_name=role_name)

    def ensure_catalogue(self) -> dict[str, int]:
        """
        Insert every :class:`RoleName` whose row is missing.

        Rows are keyed by the enum value so ids stay stable across
        environments.

        :returns: ``{"created": n, "existing": m}`` counters.
        :rtype: dict[str, int]
        """
        counters = {"created": 0, "existing": 0}
        for name in RoleName:
            if self.get(name.value) is not None:
                counters["existing"] += 1
                continue
            self.session.add(Role(id=name.value, role_name=name))
            counters["created"] += 1
        self.flush()
        return counters
