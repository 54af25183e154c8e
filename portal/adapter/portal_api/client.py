"""HTTP client for the portal REST API.

Wraps httpx and turns transport failures, HTTP error statuses and
`{"success": false}` envelopes into adapter errors.
"""

from typing import Any, Optional

import httpx
import logfire

from portal.adapter.error import AuthError, NetworkError, ServerError


class PortalApiClient:
    """Thin async client for the portal API.

    Every response is expected to use the `{success, message, data}`
    envelope; `request` returns the `data` member.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize portal API client.

        Args:
            base_url: API origin, e.g. https://portal.example.edu
            token: Bearer token of the acting account, if any
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a request and unwrap the response envelope.

        Args:
            method: HTTP method
            path: Path below the base URL
            params: Query parameters (None values are dropped)
            json: JSON body

        Returns:
            The envelope's data member (None for empty responses)

        Raises:
            AuthError: On 401/403
            NetworkError: If no response was received
            ServerError: On any other error status or unsuccessful envelope
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        with logfire.span("portal_api.request", method=method, path=path):
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self.transport,
                ) as client:
                    response = await client.request(
                        method,
                        path,
                        params=query or None,
                        json=json,
                        headers=self._headers(),
                    )
            except httpx.TimeoutException as e:
                logfire.warn("Portal API request timed out", method=method, path=path)
                raise NetworkError(f"Request to {path} timed out") from e
            except httpx.TransportError as e:
                logfire.warn(
                    "Portal API unreachable",
                    method=method,
                    path=path,
                    error=str(e),
                )
                raise NetworkError(f"Unable to reach the portal API: {e}") from e

            body = self._decode(response)
            message = self._message(body)

            if response.status_code in (401, 403):
                logfire.warn(
                    "Portal API rejected credentials",
                    path=path,
                    status_code=response.status_code,
                )
                raise AuthError(
                    message or "Authentication required",
                    status_code=response.status_code,
                )

            if response.is_error:
                logfire.error(
                    "Portal API error",
                    method=method,
                    path=path,
                    status_code=response.status_code,
                    message=message,
                )
                raise ServerError(
                    message or f"HTTP error! status: {response.status_code}",
                    status_code=response.status_code,
                )

            if isinstance(body, dict) and body.get("success") is False:
                logfire.error("Portal API reported failure", path=path, message=message)
                raise ServerError(
                    message or "Request failed", status_code=response.status_code
                )

            if isinstance(body, dict) and "data" in body:
                return body["data"]
            return body

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.is_error:
                return None
            raise ServerError(
                "Portal API returned a non-JSON response",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _message(body: Any) -> Optional[str]:
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
            if isinstance(message, str):
                return message
        return None
