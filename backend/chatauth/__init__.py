"""Expose the application factory at package level.

Provide convenient access to :func:`chatauth.factory.create_app` so callers
can ``from chatauth import create_app`` (and ``flask --app chatauth``).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
