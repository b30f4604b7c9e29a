"""API client for SimpleTasks."""

from collections.abc import Callable
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from simpletasks.models import Failure
from simpletasks.utils.logger import get_logger

UNKNOWN_ERROR_MESSAGE = "Unknown error"
NETWORK_ERROR_MESSAGE = "Network error"

TokenProvider = Callable[[], Optional[str]]


class TasksClientError(Exception):
    """Raised for every unsuccessful API call."""

    def __init__(self, failure: Failure):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def message(self) -> str:
        return self.failure.message


class APIClient:
    """HTTP client for the SimpleTasks API.

    The token is read from ``token_provider`` on every request, so a
    session change is picked up by the next call without rebuilding the
    client.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "APIClient":
        """Enter the async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the async context manager and ensure the client is closed."""
        await self.close()

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        if not skip_auth and self.token_provider is not None:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

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

    @staticmethod
    def _failure_from_response(response: httpx.Response) -> Failure:
        """Decode the ``{message}`` envelope of an unsuccessful response."""
        try:
            message = response.json()["message"]
            if not isinstance(message, str):
                raise TypeError(message)
        except (ValueError, KeyError, TypeError):
            message = UNKNOWN_ERROR_MESSAGE
        return Failure(message=message, status_code=response.status_code)

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
            TasksClientError: on a non-2xx status or a transport error.
        """
        client = self._get_client()
        url = path if path.startswith("/") else f"/{path}"

        try:
            response = await client.request(
                method=method,
                url=url,
                json=json,
                params=params,
                headers=self._get_headers(skip_auth=skip_auth),
            )
        except httpx.RequestError as e:
            get_logger(__name__).warning("%s %s failed: %r", method, url, e)
            raise TasksClientError(Failure(message=NETWORK_ERROR_MESSAGE)) from e

        if not response.is_success:
            failure = self._failure_from_response(response)
            get_logger(__name__).warning(
                "%s %s returned %s: %s",
                method,
                url,
                response.status_code,
                failure.message,
            )
            raise TasksClientError(failure)

        get_logger(__name__).debug(
            "%s %s returned %s", method, url, response.status_code
        )
        return response

    @staticmethod
    def decode(response: httpx.Response, model: Any, key: Optional[str] = None) -> Any:
        """Decode a successful response body into ``model``.

        A body that does not match the expected shape is reported the same
        way as an undecodable error body.
        """
        try:
            data = response.json()
            if key is not None:
                data = data[key]
            return model.model_validate(data)
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            get_logger(__name__).warning(
                "unexpected response body from %s: %r", response.url, e
            )
            raise TasksClientError(
                Failure(message=UNKNOWN_ERROR_MESSAGE, status_code=response.status_code)
            ) from e

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

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path)
