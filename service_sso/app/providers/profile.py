"""
Profile resolution from an opaque access token.
"""

from typing import Optional

import httpx

from shared.errors import MissingCredentialError, ProfileIncompleteError
from shared.logging import get_logger
from ..adapters.http_client import bearer_headers, request_json
from ..models import SessionState, TokenInfo


class ProfileResolver:
    """Resolves a session's email and user key via the introspection endpoint."""

    def __init__(self, profile_url: str, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.profile_url = profile_url
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("sso.profile")

    async def resolve_profile(self, session: SessionState, timeout: Optional[float] = None) -> None:
        """Fill ``session.email`` and ``session.user`` from the access token.

        A session that already carries both is returned untouched without any
        network call.

        Raises:
            MissingCredentialError: the session has no access token.
            ProfileIncompleteError: the token resolved to an empty email.
        """
        if session.user and session.email:
            return

        if not session.access_token:
            raise MissingCredentialError()

        request = httpx.Request("GET", self.profile_url, headers=bearer_headers(session.access_token))
        info = await request_json(
            request,
            TokenInfo,
            service="tokeninfo",
            timeout=timeout if timeout is not None else self.timeout,
            transport=self.transport
        )

        session.email = info.email
        session.user = info.user
        if not session.email:
            self.logger.warning("Token info without email", user=info.user)
            raise ProfileIncompleteError(details={"user": info.user})

        self.logger.debug("Profile resolved", email=session.email, user=session.user)

    async def get_email_address(self, session: SessionState, timeout: Optional[float] = None) -> str:
        """Return the account email address."""
        await self.resolve_profile(session, timeout)
        return session.email

    async def get_user_name(self, session: SessionState, timeout: Optional[float] = None) -> str:
        """Return the account user key."""
        await self.resolve_profile(session, timeout)
        return session.user
