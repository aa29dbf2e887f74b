"""Repository package exposing persistence-layer access for the models."""

from __future__ import annotations

from chatauth.repositories.base import BaseRepository
from chatauth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
