"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from chatauth.api.deps import json_response, timing
from chatauth.core.container import get_auth_service
from chatauth.core.extensions import db
from chatauth.services._shared.errors import StoreUnavailableError

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return database and revocation-store health; 503 when either fails."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    revocations = get_auth_service().revocations
    try:
        revocations_status = "ok" if revocations.ping() else "fail"
    except StoreUnavailableError:
        revocations_status = "fail"

    healthy = db_status == "ok" and revocations_status == "ok"
    payload = {
        "status": "ok" if healthy else "degraded",
        "db": db_status,
        "revocations": revocations_status,
        "revocations_backend": type(revocations).__name__,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload, status=200 if healthy else 503)
