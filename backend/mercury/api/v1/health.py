"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from mercury.api.deps import json_response, timing
from mercury.core.extensions import db
from mercury.core.security import get_components
from mercury.repositories import RoleRepository

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return database status and whether the default role is seeded."""

    db_status = "ok"
    default_role = "missing"
    try:
        role_id = get_components().settings.default_role_id
        if RoleRepository(session=db.session).get(role_id) is not None:
            default_role = "ok"
    except Exception:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    finally:
        db.session.rollback()
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "db": db_status, "default_role": default_role, "version": version}
    return json_response(payload)
