"""
Criteo SSO provider: session validation, group authorization and refresh.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import httpx

from shared.config import BaseConfig
from shared.errors import GroupMembershipLostError
from shared.logging import get_logger
from ..adapters.directory_client import DirectoryClient
from ..adapters.http_client import bearer_headers, validate_token
from ..models import SessionState
from .base import ProviderData
from .groups import GroupAuthorizer
from .profile import ProfileResolver

PROVIDER_NAME = "Criteo"
DEFAULT_SCOPE = "cn mail uid dn umsId"
REALM = "criteo"

# Expiry extension applied when a refresh only re-checks group membership.
REFRESH_HEARTBEAT = timedelta(seconds=1)


def _sso_url(sso_host: str, path: str) -> str:
    return f"https://{sso_host}{path}?realm={REALM}"


class CriteoProvider:
    """Criteo based identity provider.

    Identity comes from the SSO token info endpoint; authorization comes from
    the directory service, where the user's groups must intersect the
    configured allow-list.
    """

    def __init__(self, data: ProviderData, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.data = data
        self.transport = transport
        self.logger = get_logger("sso.criteo")

        self.profile = ProfileResolver(data.profile_url, data.request_timeout, transport)
        self.directory = DirectoryClient(data.identity_url, data.request_timeout, transport)
        self.groups = GroupAuthorizer(self.directory, data.allowed_groups)

    @classmethod
    def configure(cls, sso_host: str, identity_host: str, groups: Iterable[str], *,
                  login_url: Optional[str] = None,
                  redeem_url: Optional[str] = None,
                  profile_url: Optional[str] = None,
                  validate_url: Optional[str] = None,
                  scope: str = "",
                  request_timeout: float = 10.0,
                  transport: Optional[httpx.AsyncBaseTransport] = None) -> "CriteoProvider":
        """Build a provider, defaulting every unset endpoint from the hosts."""
        profile_url = profile_url or _sso_url(sso_host, "/auth/oauth2/tokeninfo")
        data = ProviderData(
            provider_name=PROVIDER_NAME,
            login_url=login_url or _sso_url(sso_host, "/auth/oauth2/authorize"),
            redeem_url=redeem_url or _sso_url(sso_host, "/auth/oauth2/access_token"),
            profile_url=profile_url,
            validate_url=validate_url or profile_url,
            identity_url=f"http://{identity_host}/user/",
            scope=scope or DEFAULT_SCOPE,
            allowed_groups=frozenset(groups),
            request_timeout=request_timeout,
        )
        return cls(data, transport=transport)

    async def get_profile(self, session: SessionState, timeout: Optional[float] = None) -> None:
        await self.profile.resolve_profile(session, timeout)

    async def get_email_address(self, session: SessionState, timeout: Optional[float] = None) -> str:
        """Return the account email address."""
        return await self.profile.get_email_address(session, timeout)

    async def get_user_name(self, session: SessionState, timeout: Optional[float] = None) -> str:
        """Return the account user name."""
        return await self.profile.get_user_name(session, timeout)

    async def validate_session(self, session: SessionState, timeout: Optional[float] = None) -> bool:
        """Validate the access token against the token info endpoint."""
        return await validate_token(
            self.data.validate_url,
            session.access_token,
            bearer_headers(session.access_token),
            timeout=timeout if timeout is not None else self.data.request_timeout,
            transport=self.transport
        )

    async def validate_group(self, session: SessionState, timeout: Optional[float] = None) -> bool:
        """Validate that the session's user exists in the configured group(s)."""
        return await self.groups.is_authorized(session.user, timeout)

    async def refresh_session_if_needed(self, session: Optional[SessionState],
                                        timeout: Optional[float] = None) -> bool:
        """Re-check group membership once the session has expired.

        Tokens are never exchanged here: a still-authorized session only has
        its expiry pushed forward by ``REFRESH_HEARTBEAT``, so the result is
        always False.

        Raises:
            GroupMembershipLostError: the user left every allowed group; the
                session's expiry is left untouched.
            RequestCancelledError: the group check timed out; the expiry is
                left untouched.
        """
        now = datetime.now(timezone.utc)
        if session is None or not session.refresh_token:
            return False
        if session.expires_on is not None and not session.is_expired(now):
            return False

        if not await self.validate_group(session, timeout):
            self.logger.warning("Group membership lost on refresh", session=str(session))
            raise GroupMembershipLostError(
                f"{session.email} is no longer in the group(s)",
                details={"user": session.user}
            )

        orig_expiration = session.expires_on
        session.expires_on = (now + REFRESH_HEARTBEAT).replace(microsecond=0)
        self.logger.info(
            "refreshed access token",
            session=str(session),
            expired_on=orig_expiration.isoformat() if orig_expiration else None
        )
        return False


def new_criteo_provider(config: BaseConfig,
                        transport: Optional[httpx.AsyncBaseTransport] = None) -> CriteoProvider:
    """Create the provider from service configuration."""
    return CriteoProvider.configure(
        config.sso_host,
        config.identity_host,
        config.allowed_groups,
        login_url=config.login_url,
        redeem_url=config.redeem_url,
        profile_url=config.profile_url,
        validate_url=config.validate_url,
        scope=config.scope,
        request_timeout=config.request_timeout,
        transport=transport,
    )
