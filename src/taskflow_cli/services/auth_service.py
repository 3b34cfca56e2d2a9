"""Service for handling authentication-related operations."""

from taskflow_cli.api.auth import AuthAPI
from taskflow_cli.errors import ValidationFailed
from taskflow_cli.models import Identity, Session
from taskflow_cli.services.session_store import SessionStore


class AuthService:
    """Logs users in and out through the session store."""

    def __init__(self, session_store: SessionStore, auth_api: AuthAPI):
        self.session_store = session_store
        self.auth_api = auth_api

    def is_authenticated(self) -> bool:
        """Check if the user is authenticated."""
        return self.session_store.is_authenticated()

    def current_identity(self) -> Identity | None:
        return self.session_store.identity

    async def login(self, email: str, password: str) -> Session:
        """Authenticate and persist the resulting session.

        Raises:
            ValidationFailed: email or password is empty.
            Unauthorized: the server rejected the credentials.
            SessionPersistenceError: the session could not be saved.
        """
        if not email:
            raise ValidationFailed("email", "Email is required")
        if not password:
            raise ValidationFailed("password", "Password is required")

        result = await self.auth_api.login(email, password)
        return self.session_store.establish(result.token, result.to_identity())

    def logout(self) -> None:
        """Forget the session locally. The API has no logout endpoint."""
        self.session_store.clear()
