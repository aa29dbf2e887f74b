"""Service layer public API.

Re-exports
----------
- Base primitives (from ``chatauth.services._shared.base``)
    * :class:`BaseService`

- Authentication service (from ``chatauth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`, :class:`TokenPairOut`, :class:`IdentityOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import IdentityOut, LoginIn, LogoutIn, RefreshIn, RegisterIn, TokenPairOut
from .auth.service import AuthService

__all__ = [
    "BaseService",
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "TokenPairOut",
    "IdentityOut",
]
