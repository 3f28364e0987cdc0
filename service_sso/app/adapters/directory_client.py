"""
Directory service client.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from shared.errors import MissingCredentialError
from shared.logging import get_logger
from .http_client import DEFAULT_TIMEOUT, bearer_headers, request_json


class DirectoryClient:
    """Client for GET lookups against the directory (identity) service."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("sso.directory_client")

    @staticmethod
    def entry_path(user_key: str) -> str:
        """Path of a user entry relative to the directory base URL."""
        return quote(user_key, safe="/=,:@;+&$")

    @classmethod
    def groups_path(cls, user_key: str) -> str:
        """Path of a user entry's group memberships."""
        return f"{cls.entry_path(user_key)}/groups"

    async def fetch(self, path: str, target: Any, access_token: Optional[str] = None,
                    timeout: Optional[float] = None) -> Any:
        """GET ``base_url + path`` and decode the JSON body into ``target``.

        Passing ``access_token`` marks the call as authenticated: bearer
        headers are attached, and an empty token fails with
        ``MissingCredentialError`` before anything is sent.
        """
        headers = None
        if access_token is not None:
            if not access_token:
                raise MissingCredentialError()
            headers = bearer_headers(access_token)

        self.logger.debug("Directory lookup", path=path, authenticated=headers is not None)
        request = httpx.Request("GET", f"{self.base_url}{path}", headers=headers)
        return await request_json(
            request,
            target,
            service="directory",
            timeout=timeout if timeout is not None else self.timeout,
            transport=self.transport
        )
