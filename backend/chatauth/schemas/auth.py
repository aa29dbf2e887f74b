"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

_not_blank = validate.Length(min=1)


class _InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_InputSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=255))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    display_name = fields.String(
        required=True, data_key="displayName", validate=validate.Length(min=3, max=100)
    )
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=8, max=128)
    )


class LoginSchema(_InputSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=255))
    # No length rule: a too-short password is simply a wrong password.
    password = fields.String(required=True, load_only=True, validate=_not_blank)


class RefreshSchema(_InputSchema):
    """Input payload carrying the refresh token to rotate."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", load_only=True, validate=_not_blank
    )


class LogoutSchema(_InputSchema):
    """Logout body; a missing or empty refresh token is tolerated."""

    refresh_token = fields.String(data_key="refreshToken", load_default="", load_only=True)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    token_type = fields.String(data_key="tokenType", dump_default="bearer")


class IdentitySchema(Schema):
    """Response payload exposing the authenticated identity."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    display_name = fields.String(required=True, data_key="displayName")
