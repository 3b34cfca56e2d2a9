"""API client for TaskFlow."""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from taskflow_cli.config import get_config_manager
from taskflow_cli.errors import (
    NetworkFailure,
    ServerFailure,
    SessionPersistenceError,
    Unauthorized,
    ValidationFailed,
    error_from_response,
)
from taskflow_cli.services.session_store import SessionStore
from taskflow_cli.utils.logger import get_logger

logger = get_logger("gateway")


class APIClient:
    """HTTP client for the TaskFlow API.

    Attaches the current session credential as a bearer token and turns
    every failure into one of the classes in ``taskflow_cli.errors``. A 401
    on an authenticated call clears the session before the error propagates.
    Requests are never retried here.
    """

    def __init__(
        self,
        session_store: SessionStore,
        base_url: str,
        *,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_store = session_store
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        if not skip_auth:
            credential = self.session_store.credential
            if credential:
                headers["Authorization"] = f"Bearer {credential}"

        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        """Make an HTTP request to the API.

        Raises:
            Unauthorized, NotFound, ValidationFailed, Conflict, ServerFailure:
                classified from the response status.
            NetworkFailure: the request never got a response.
        """
        client = self._get_client()
        url = path if path.startswith("/") else f"/{path}"
        headers = self._get_headers(skip_auth=skip_auth)

        try:
            response = await client.request(
                method=method,
                url=url,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", method, url)
            raise NetworkFailure(f"Request timed out: {method} {url}") from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkFailure(f"Could not reach the server: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.is_success:
            return response

        try:
            body = response.json()
        except ValueError:
            body = None
        error = error_from_response(response.status_code, body)
        logger.warning(
            "%s %s failed with %s: %s",
            method,
            url,
            type(error).__name__,
            error.message,
        )

        if isinstance(error, Unauthorized) and "Authorization" in headers:
            try:
                self.session_store.clear()
            except SessionPersistenceError as clear_error:
                logger.error("session cleared in memory only: %s", clear_error)
        raise error

    async def get(
        self, path: str, *, params: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, *, json: Optional[dict[str, Any]] = None, skip_auth: bool = False
    ) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json, skip_auth=skip_auth)

    async def put(
        self, path: str, *, json: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, json=json)

    async def patch(
        self, path: str, *, json: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        """Make a PATCH request."""
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path)


def validate_input(model: type[BaseModel], **data: Any) -> BaseModel:
    """Build a request body locally, raising ValidationFailed on bad input.

    Nothing is sent to the server when this fails.
    """
    try:
        return model(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        message = first["msg"].removeprefix("Value error, ")
        details = {
            ".".join(str(part) for part in err["loc"]): err["msg"] for err in e.errors()
        }
        raise ValidationFailed(field, message, details=details) from e


def parse_response(response: httpx.Response, model: Any) -> Any:
    """Validate a response body against a pydantic model or TypeAdapter.

    A body that is not JSON, or does not match the expected shape, is a
    server-side fault and raises ServerFailure.
    """
    validate = (
        model.validate_python
        if isinstance(model, TypeAdapter)
        else model.model_validate
    )
    try:
        return validate(response.json())
    except (ValueError, ValidationError) as e:
        raise ServerFailure(
            f"Unexpected response body from {response.request.method} "
            f"{response.request.url.path}",
            response.status_code,
        ) from e


def get_client(session_store: SessionStore, profile: str = "default") -> APIClient:
    """Get an API client configured from the profile's settings."""
    config = get_config_manager(profile).config
    return APIClient(
        session_store,
        config.api.endpoint,
        timeout=config.api.timeout,
    )
