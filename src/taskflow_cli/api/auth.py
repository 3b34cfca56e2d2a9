"""Authentication API endpoints."""

from taskflow_cli.api.client import APIClient, parse_response
from taskflow_cli.models import LoginResponse


class AuthAPI:
    """Authentication API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def login(self, email: str, password: str) -> LoginResponse:
        """Exchange email and password for a token.

        Raises Unauthorized on bad credentials.
        """
        response = await self.client.post(
            "/auth/login",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return parse_response(response, LoginResponse)
