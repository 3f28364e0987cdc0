"""
SSO provider service.

Exposes the provider operations over HTTP so a gateway can drive them
remotely. Each request carries the session it operates on and receives the
(possibly enriched) session back; nothing is stored here.
"""

from datetime import datetime
from typing import Optional

import httpx
from pydantic import BaseModel

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.logging import set_user_context
from .models import SessionState
from .providers.criteo import new_criteo_provider


class SessionPayload(BaseModel):
    """Wire form of a gateway session."""

    access_token: str = ""
    refresh_token: str = ""
    email: str = ""
    user: str = ""
    expires_on: Optional[datetime] = None

    def to_session(self) -> SessionState:
        return SessionState(**self.model_dump())

    @classmethod
    def from_session(cls, session: SessionState) -> "SessionPayload":
        return cls(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            email=session.email,
            user=session.user,
            expires_on=session.expires_on,
        )


class SSOService(BaseService):
    """SSO provider service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__("sso", 8013, config or get_config("sso", 8013))
        self.provider = new_criteo_provider(self.config, transport=transport)
        self._setup_sso_routes()

    def _setup_sso_routes(self):
        """Set up provider routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "sso",
                "provider": self.provider.data.provider_name,
                "scope": self.provider.data.scope,
                "version": "1.0.0"
            }

        @self.app.post("/auth/profile")
        async def resolve_profile(payload: SessionPayload):
            """Resolve email and user key for a session."""
            session = payload.to_session()
            await self.provider.get_profile(session)
            set_user_context(user_id=session.user, email=session.email)

            return {
                "email": session.email,
                "user": session.user,
                "session": SessionPayload.from_session(session)
            }

        @self.app.post("/auth/session/validate")
        async def validate_session(payload: SessionPayload):
            """Check the session's access token."""
            valid = await self.provider.validate_session(payload.to_session())
            if not valid:
                self.logger.info("Session token rejected", user=payload.user)
            return {"valid": valid}

        @self.app.post("/auth/session/authorize")
        async def authorize_session(payload: SessionPayload):
            """Check the session's group membership."""
            session = payload.to_session()
            set_user_context(user_id=session.user, email=session.email)
            return {"authorized": await self.provider.validate_group(session)}

        @self.app.post("/auth/session/refresh")
        async def refresh_session(payload: SessionPayload):
            """Refresh the session if it has expired."""
            session = payload.to_session()
            set_user_context(user_id=session.user, email=session.email)
            refreshed = await self.provider.refresh_session_if_needed(session)

            return {
                "refreshed": refreshed,
                "session": SessionPayload.from_session(session)
            }

    def _describe_dependencies(self):
        """Describe configured upstream endpoints."""
        return {
            "tokeninfo": self.provider.data.profile_url,
            "directory": self.provider.data.identity_url,
        }


def create_app(config: Optional[ServiceConfig] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None):
    """Create FastAPI application."""
    service = SSOService(config, transport=transport)
    return service.app


if __name__ == "__main__":
    service = SSOService()
    service.run()
