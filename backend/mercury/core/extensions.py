"""Flask extension singletons.

Created unbound at import time and attached to an app by :func:`init_app`.
"""

from __future__ import annotations

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Constraint names match the migrations (uq_users_email, fk_users_role_id_roles, ...)
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)
# Verifies bearer tokens on protected routes; the auth service issues them
jwt = JWTManager()


def init_app(app: Flask) -> None:
    """Bind ``db``, ``migrate`` and ``jwt`` to ``app``.

    The model package is imported before Flask-Migrate binds so the
    metadata lists every table.
    """
    db.init_app(app)

    from mercury import models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
