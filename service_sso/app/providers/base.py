"""
Provider configuration and the capability protocol the gateway drives.
"""

from typing import FrozenSet, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from ..models import SessionState


class ProviderData(BaseModel):
    """Immutable provider configuration, built once at startup."""

    model_config = ConfigDict(frozen=True)

    provider_name: str = ""
    login_url: str = ""
    redeem_url: str = ""
    profile_url: str = ""
    validate_url: str = ""
    identity_url: str = ""
    scope: str = ""
    allowed_groups: FrozenSet[str] = frozenset()
    request_timeout: float = 10.0


@runtime_checkable
class Provider(Protocol):
    """Operations a gateway calls on an identity provider integration."""

    data: ProviderData

    async def get_profile(self, session: SessionState, timeout: Optional[float] = None) -> None:
        """Resolve email and user key into ``session``."""
        ...

    async def get_email_address(self, session: SessionState, timeout: Optional[float] = None) -> str:
        ...

    async def get_user_name(self, session: SessionState, timeout: Optional[float] = None) -> str:
        ...

    async def validate_session(self, session: SessionState, timeout: Optional[float] = None) -> bool:
        """Return whether the session's access token is still valid."""
        ...

    async def validate_group(self, session: SessionState, timeout: Optional[float] = None) -> bool:
        """Return whether the session's user is in an allowed group."""
        ...

    async def refresh_session_if_needed(self, session: Optional[SessionState],
                                        timeout: Optional[float] = None) -> bool:
        """Refresh bookkeeping for an expired session; True if tokens were exchanged."""
        ...
