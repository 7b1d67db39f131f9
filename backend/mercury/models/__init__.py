from mercury.models.role import Role, RoleName
from mercury.models.user import User

__all__ = [
    "Role",
    "RoleName",
    "User",
]
