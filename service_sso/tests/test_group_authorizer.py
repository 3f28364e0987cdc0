"""
Unit tests for GroupAuthorizer.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch
import json

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_sso.app.adapters.directory_client import DirectoryClient
from service_sso.app.models import DirectoryEntry
from service_sso.app.providers.groups import GroupAuthorizer
from shared.errors import RemoteUnavailableError, RequestCancelledError

BASE_URL = "http://directory.local/user/"
USER_KEY = "uid=j.doe,ou=people"


def make_response(payload, status_code=200, path=""):
    """Build a directory response."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("GET", f"{BASE_URL}{path}")
    )


def directory_responses(groups):
    """Entry and group responses for USER_KEY."""
    return [
        make_response({"cn": "John Doe", "dn": USER_KEY}, path=USER_KEY),
        make_response([{"name": name} for name in groups], path=f"{USER_KEY}/groups"),
    ]


def make_authorizer(allowed):
    return GroupAuthorizer(DirectoryClient(BASE_URL), allowed)


class TestGroupAuthorizer:
    """Test cases for GroupAuthorizer."""

    @pytest.mark.asyncio
    async def test_member_of_allowed_group(self):
        """Test a matching membership authorizes the user."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            send = AsyncMock(side_effect=directory_responses(["eng", "ops"]))
            mock_client.return_value.__aenter__.return_value.send = send

            assert await authorizer.is_authorized(USER_KEY) is True

            urls = [str(call.args[0].url) for call in send.call_args_list]
            assert urls == [
                "http://directory.local/user/uid=j.doe,ou=people",
                "http://directory.local/user/uid=j.doe,ou=people/groups",
            ]
            for call in send.call_args_list:
                assert "Authorization" not in call.args[0].headers

    @pytest.mark.asyncio
    async def test_not_a_member(self):
        """Test no matching membership denies without raising."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=directory_responses(["eng"])
            )

            assert await authorizer.is_authorized(USER_KEY) is False

    @pytest.mark.asyncio
    async def test_order_independent_match(self):
        """Test matching does not depend on allow-list order."""
        authorizer = make_authorizer(["admins", "ops", "eng"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=directory_responses(["sales", "eng"])
            )

            assert await authorizer.is_authorized(USER_KEY) is True

    @pytest.mark.asyncio
    async def test_match_is_case_sensitive(self):
        """Test group names must match exactly."""
        authorizer = make_authorizer(["Ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=directory_responses(["ops", "ops-admins"])
            )

            assert await authorizer.is_authorized(USER_KEY) is False

    @pytest.mark.asyncio
    async def test_empty_allow_list_denies(self):
        """Test an empty allow-list never authorizes."""
        authorizer = make_authorizer([])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=directory_responses(["eng"])
            )

            assert await authorizer.is_authorized(USER_KEY) is False

    @pytest.mark.asyncio
    async def test_entry_lookup_failure_denies(self):
        """Test a failed entry lookup fails closed and skips the group call."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            send = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
            mock_client.return_value.__aenter__.return_value.send = send

            assert await authorizer.is_authorized(USER_KEY) is False
            assert send.await_count == 1

    @pytest.mark.asyncio
    async def test_groups_lookup_failure_denies(self):
        """Test a failed group lookup fails closed."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(side_effect=[
                make_response({"cn": "John Doe", "dn": USER_KEY}),
                make_response({"detail": "boom"}, status_code=500),
            ])

            assert await authorizer.is_authorized(USER_KEY) is False

    @pytest.mark.asyncio
    async def test_malformed_groups_deny(self):
        """Test a malformed group body fails closed."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(side_effect=[
                make_response({"cn": "John Doe", "dn": USER_KEY}),
                make_response("not json"),
            ])

            assert await authorizer.is_authorized(USER_KEY) is False

    @pytest.mark.asyncio
    async def test_timeout_raises_cancelled(self):
        """Test an elapsed timeout is reported instead of denying access."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=httpx.ReadTimeout("Request timeout")
            )

            with pytest.raises(RequestCancelledError):
                await authorizer.is_authorized(USER_KEY, timeout=0.1)

    @pytest.mark.asyncio
    async def test_empty_user_key_denies_without_lookup(self):
        """Test an unresolved user is denied without network calls."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            assert await authorizer.is_authorized("") is False
            mock_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_profile_raises(self):
        """Test the extended profile lookup propagates failures."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(RemoteUnavailableError):
                await authorizer.fetch_profile(USER_KEY)

    @pytest.mark.asyncio
    async def test_fetch_profile_returns_entry_and_groups(self):
        """Test the extended profile lookup."""
        authorizer = make_authorizer(["ops"])

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.send = AsyncMock(
                side_effect=directory_responses(["eng", "ops"])
            )

            entry, groups = await authorizer.fetch_profile(USER_KEY)

            assert entry == DirectoryEntry(cn="John Doe", dn=USER_KEY)
            assert [group.name for group in groups] == ["eng", "ops"]
