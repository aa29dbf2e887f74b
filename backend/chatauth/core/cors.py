"""CORS configuration for the single-page frontend."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated origin list, dropping blanks and trailing slashes."""
    return [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Allow the configured frontend origins to call ``/api/*``.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS`` (falling back to ``FRONTEND_URL``)
        and ``CORS_MAX_AGE`` settings are consulted. A blank list or ``"*"``
        allows any origin but disables credential support.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
