"""
Provider package for the SSO service.

- base: immutable provider configuration and the Provider protocol
- profile: identity resolution from an access token
- groups: directory group authorization
- criteo: the Criteo provider tying them into the session lifecycle
"""

from .base import Provider, ProviderData
from .criteo import CriteoProvider, new_criteo_provider
from .groups import GroupAuthorizer
from .profile import ProfileResolver

__all__ = [
    "CriteoProvider",
    "GroupAuthorizer",
    "ProfileResolver",
    "Provider",
    "ProviderData",
    "new_criteo_provider",
]
