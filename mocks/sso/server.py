"""
Mock SSO realm and directory service for local development and tests.

Serves the token info endpoint of the SSO realm and the user / group
lookups of the directory service from one FastAPI app.
"""

from typing import Dict, List, Optional

from fastapi import FastAPI, Header, HTTPException, Query

from shared.logging import get_logger


class MockSSOServer:
    """Mock SSO + directory server implementation."""

    def __init__(self, port: int = 8443):
        self.port = port
        self.logger = get_logger("mock.sso")
        self.app = FastAPI(title="Mock SSO", version="1.0.0")
        self.realm = "criteo"

        # access token -> token info
        self.tokens: Dict[str, Dict[str, str]] = {
            "token-jdoe": {"mail": "j.doe@example.com", "dn": "uid=j.doe,ou=people"},
            "token-asmith": {"mail": "a.smith@example.com", "dn": "uid=a.smith,ou=people"},
            "token-noemail": {"mail": "", "dn": "uid=ghost,ou=people"},
        }

        # dn -> directory entry and groups
        self.users: Dict[str, Dict] = {
            "uid=j.doe,ou=people": {"cn": "John Doe", "groups": ["eng", "ops"]},
            "uid=a.smith,ou=people": {"cn": "Alice Smith", "groups": ["sales"]},
        }

        self._setup_routes()

    def set_groups(self, dn: str, groups: List[str]):
        """Change a user's memberships, e.g. to simulate leaving a group."""
        self.users[dn]["groups"] = list(groups)

    def _token_info(self, authorization: Optional[str]) -> Dict[str, str]:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Missing bearer token")
        info = self.tokens.get(authorization[7:])
        if info is None:
            raise HTTPException(status_code=401, detail="Invalid token")
        return info

    def _setup_routes(self):
        """Set up mock routes."""

        @self.app.get("/auth/oauth2/tokeninfo")
        async def tokeninfo(realm: str = Query(...), authorization: Optional[str] = Header(None)):
            """Token info endpoint."""
            if realm != self.realm:
                raise HTTPException(status_code=404, detail="Realm not found")
            return self._token_info(authorization)

        @self.app.get("/user/{dn}/groups")
        async def user_groups(dn: str):
            """Group membership endpoint."""
            user = self.users.get(dn)
            if user is None:
                raise HTTPException(status_code=404, detail="User not found")
            return [{"name": name} for name in user["groups"]]

        @self.app.get("/user/{dn}")
        async def user_entry(dn: str):
            """Directory entry endpoint."""
            user = self.users.get(dn)
            if user is None:
                raise HTTPException(status_code=404, detail="User not found")
            return {"cn": user["cn"], "dn": dn}


def create_app() -> FastAPI:
    """Create the mock application."""
    return MockSSOServer().app


if __name__ == "__main__":
    import uvicorn
    server = MockSSOServer()
    uvicorn.run(server.app, host="0.0.0.0", port=server.port)
