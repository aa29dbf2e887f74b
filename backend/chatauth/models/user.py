"""User model backing the credential store."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from chatauth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity plus the minimal profile the chat UI needs.

    Fields
    ------
    email : str
        Login email. Unique; stored exactly as registered (case-sensitive).
    username : str
        Public handle. Unique per system.
    display_name : str
        Name shown to other participants.
    password_hash : str
        Argon2id PHC string produced by the password hasher. Never serialized.
    avatar_url : str | None
        Optional avatar location.
    status : str
        Presence marker, ``offline`` until a client reports otherwise.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="offline", server_default="offline"
    )

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_email", "email"),
        Index("ix_users_username", "username"),
    )

    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading or writing plaintext on the model.

        Hashing belongs to the password hasher; assign ``password_hash``.

        :raises AttributeError: Always.
        """
        raise AttributeError("Plaintext passwords never touch the model; set password_hash.")

    # -------------------- Validators --------------------
    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        """
        Trim and sanity-check the email without changing its case.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip()
        # Local part and domain must be present; full validation happens at API layer.
        local, sep, domain = v.rpartition("@")
        if not sep or not local or not domain:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username", "display_name")
    def _validate_names(self, key: str, value: str) -> str:
        """
        Trim handles and display names; reject blanks.

        :raises ValueError: If the value is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
