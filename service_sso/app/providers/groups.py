"""
Group authorization against the directory service.
"""

from typing import Iterable, List, Optional, Tuple

from shared.errors import AccessLayerException, RequestCancelledError
from shared.logging import get_logger
from ..adapters.directory_client import DirectoryClient
from ..models import DirectoryEntry, GroupInfo


class GroupAuthorizer:
    """Checks a user's directory group memberships against an allow-list."""

    def __init__(self, directory: DirectoryClient, allowed_groups: Iterable[str]):
        self.directory = directory
        self.allowed_groups = frozenset(allowed_groups)
        self.logger = get_logger("sso.groups")

    async def fetch_profile(self, user_key: str,
                            timeout: Optional[float] = None) -> Tuple[DirectoryEntry, List[GroupInfo]]:
        """Fetch the user's directory entry, then its group memberships."""
        entry = await self.directory.fetch(
            DirectoryClient.entry_path(user_key), DirectoryEntry, timeout=timeout
        )
        groups = await self.directory.fetch(
            DirectoryClient.groups_path(user_key), List[GroupInfo], timeout=timeout
        )
        return entry, groups

    async def is_authorized(self, user_key: str, timeout: Optional[float] = None) -> bool:
        """Return True if the user belongs to at least one allowed group.

        Directory failures deny access instead of raising. An elapsed
        timeout raises RequestCancelledError.
        """
        if not user_key:
            self.logger.warning("Group check without user key")
            return False

        try:
            entry, groups = await self.fetch_profile(user_key, timeout)
        except RequestCancelledError:
            raise
        except AccessLayerException as e:
            self.logger.error(
                "Directory lookup failed, denying access",
                user=user_key,
                code=e.code,
                error=e.message
            )
            return False

        for group in groups:
            if group.name in self.allowed_groups:
                self.logger.debug("Group membership granted", user=user_key, cn=entry.cn, group=group.name)
                return True

        self.logger.info(
            "User not in allowed groups",
            user=user_key,
            cn=entry.cn,
            groups=[group.name for group in groups]
        )
        return False
