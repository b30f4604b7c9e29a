"""Authentication API endpoints."""

from simpletasks.api.client import APIClient
from simpletasks.models import AuthToken


class AuthAPI:
    """Authentication API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def login(self, email: str, password: str) -> AuthToken:
        """Login with email and password."""
        response = await self.client.post(
            "/auth",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return self.client.decode(response, AuthToken)

    async def register(self, email: str, password: str) -> AuthToken:
        """Create an account and return its token."""
        response = await self.client.post(
            "/users",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return self.client.decode(response, AuthToken)
