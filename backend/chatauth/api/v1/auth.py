"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, current_app

from chatauth.api.deps import bearer_token, json_body, json_response, timing
from chatauth.core.container import get_auth_service
from chatauth.core.extensions import limiter
from chatauth.schemas import (
    IdentitySchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from chatauth.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
token_schema = TokenPairSchema()
identity_schema = IdentitySchema()


def _register_rate_limit() -> str:
    return str(current_app.config.get("AUTH_REGISTER_RATE_LIMIT", "3 per minute"))


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@limiter.limit(_register_rate_limit)
@timing
def register():
    """Register a new identity and return its first token pair."""

    data = register_schema.load(json_body())
    pair = get_auth_service().register(RegisterIn(**data))
    return json_response({"data": token_schema.dump(pair)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(json_body())
    pair = get_auth_service().login(LoginIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new pair (the old one is revoked)."""

    data = refresh_schema.load(json_body())
    pair = get_auth_service().refresh(RefreshIn(**data))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the bearer access token and the refresh token in the body."""

    access_token = bearer_token()
    service = get_auth_service()
    service.authenticate(access_token)
    data = logout_schema.load(json_body())
    service.logout(LogoutIn(access_token=access_token, refresh_token=data["refresh_token"]))
    return Response(status=204)


@bp.get("/me")
@timing
def me():
    """Return the identity named by the bearer access token."""

    identity = get_auth_service().current_identity(bearer_token())
    return json_response({"data": identity_schema.dump(identity)})
