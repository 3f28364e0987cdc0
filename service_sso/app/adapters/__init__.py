"""
Adapters package for the SSO provider.

HTTP wrappers for the identity provider and the directory service:

- http_client: generic JSON request and token validation calls
- directory_client: user entry and group membership lookups

Adapters map transport and decode failures onto shared errors and never
retry; the caller decides what a failure means.
"""

from .directory_client import DirectoryClient
from .http_client import bearer_headers, request_json, validate_token

__all__ = [
    "DirectoryClient",
    "bearer_headers",
    "request_json",
    "validate_token",
]
