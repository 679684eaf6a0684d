"""
Infrastructure layer: HTTP client for the forest management backend.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from forest_console.config import settings
from forest_console.infrastructure.api_constants import APIConstants

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base exception for failed backend calls."""

    status_code = 502

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(GatewayError):
    """The request never reached the backend (connection refused, timeout, ...)."""


class ServerError(GatewayError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        status_text: str,
        detail: Optional[str] = None,
    ):
        super().__init__(f"API Error: {status_code} {status_text}")
        self.status_code = status_code
        self.status_text = status_text
        self.detail = detail


class ValidationError(ServerError):
    """The backend rejected a create/update payload as malformed."""


class NotFoundError(ServerError):
    """The backend has no record with the requested identifier."""


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull a human readable ``message`` out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None


class ForestAPIClient:
    """
    Client for interacting with the forest management backend.

    One instance is shared by every gateway in the process. Requests are
    never retried; every failure is mapped onto the gateway error taxonomy
    and raised to the caller.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the API client with configuration.

        Args:
            base_url: Backend base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": APIConstants.CONTENT_TYPE_JSON,
                "accept": APIConstants.CONTENT_TYPE_JSON,
            },
            timeout=timeout or settings.request_timeout,
        )

    async def __aenter__(self) -> "ForestAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        token: Optional[str] = None,
        **kwargs
    ) -> Any:
        """
        Make a single HTTP request and decode the JSON response.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            token: Optional bearer token for the Authorization header
            **kwargs: Additional arguments for the request

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            NetworkError: If the backend could not be reached
            NotFoundError: On 404
            ValidationError: On 400/422
            ServerError: On any other non-2xx status, or a 2xx body that is not JSON
        """
        headers: Dict[str, str] = kwargs.pop("headers", None) or {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s%s", method, self.base_url, endpoint)
        try:
            response = await self.client.request(method, endpoint, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(f"API request error: {str(e)}") from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise ServerError(
                    response.status_code,
                    "Invalid response body",
                    f"Expected JSON from {endpoint}",
                ) from e

        status_code = response.status_code
        status_text = response.reason_phrase
        detail = _error_detail(response)
        if status_code == 404:
            raise NotFoundError(status_code, status_text, detail)
        if status_code in APIConstants.VALIDATION_STATUS_CODES:
            raise ValidationError(status_code, status_text, detail)
        raise ServerError(status_code, status_text, detail)


# Singleton instance
_api_client: Optional[ForestAPIClient] = None


def get_api_client() -> ForestAPIClient:
    """
    Get or create the singleton API client instance.

    Returns:
        ForestAPIClient instance
    """
    global _api_client
    if _api_client is None:
        _api_client = ForestAPIClient()
    return _api_client
