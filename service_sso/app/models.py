"""
Data models shared by the SSO provider components.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class SessionState:
    """Session record owned by the gateway.

    The provider only enriches ``email`` and ``user`` and moves
    ``expires_on``; it never creates or destroys sessions.
    """

    access_token: str = ""
    refresh_token: str = ""
    email: str = ""
    user: str = ""
    expires_on: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once ``expires_on`` is set and not in the future."""
        if self.expires_on is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_on = self.expires_on
        if expires_on.tzinfo is None:
            # naive timestamps are stored as UTC
            expires_on = expires_on.replace(tzinfo=timezone.utc)
        return expires_on <= now

    def __str__(self) -> str:
        parts = [f"email:{self.email}", f"user:{self.user}"]
        if self.access_token:
            parts.append("token:true")
        if self.expires_on is not None:
            parts.append(f"expires:{self.expires_on.isoformat()}")
        if self.refresh_token:
            parts.append("refresh_token:true")
        return "Session{" + " ".join(parts) + "}"


class TokenInfo(BaseModel):
    """Identity attributes returned by the token introspection endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(default="", alias="mail")
    user: str = Field(default="", alias="dn")


class DirectoryEntry(BaseModel):
    """User entry as returned by the directory service."""

    model_config = ConfigDict(frozen=True)

    cn: str = ""
    dn: str = ""


class GroupInfo(BaseModel):
    """A single group membership of a directory entry."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
