"""HTTP client for the committee API with JSON validation and retry"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from committee_gateway.config import settings
from committee_gateway.domain.exceptions import AuthenticationError, DomainException


class CommitteeAPIError(DomainException):
    """API unreachable, returned an error, or answered with something that is not JSON"""

    status_code = 503


def is_valid_json(text: Optional[str]) -> bool:
    """
    Strict JSON check that rejects HTML bodies.

    Misconfigured proxies answer with an HTML page, which must not be
    mistaken for application state.
    """
    if not text or not isinstance(text, str):
        return False

    trimmed = text.strip()
    if trimmed.startswith("<"):
        return False
    if not trimmed.startswith(("{", "[")):
        return False

    try:
        json.loads(trimmed)
    except ValueError:
        return False
    return True


class CommitteeClient:
    """Client for the whole-document endpoints"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.client_max_retries
        self.backoff_base = settings.client_backoff_base
        self.transport = transport

    async def fetch_state(self) -> Dict[str, Any]:
        """GET /api/data - full state without passwords"""
        return await self._request("GET", "/api/data")

    async def save_state(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """POST /api/data - replace the stored state"""
        return await self._request("POST", "/api/data", json=state)

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        POST /api/login and return the user record.

        Raises:
            AuthenticationError: Credentials rejected
            CommitteeAPIError: Any other failure
        """
        try:
            data = await self._request("POST", "/api/login", json={"username": username, "password": password})
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                raise AuthenticationError("Credenciales inválidas") from e
            raise CommitteeAPIError(f"Committee API error: {e.response.status_code}") from e
        return data["user"]

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Send a request with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ...
        - Retries on 5xx errors and network failures
        - 4xx responses are raised immediately as httpx.HTTPStatusError
          for 401, CommitteeAPIError otherwise
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    response = await client.request(method, f"{self.base_url}{path}", **kwargs)
                    if response.status_code == 401:
                        response.raise_for_status()
                    if response.is_client_error:
                        raise CommitteeAPIError(_describe_error(response))
                    if response.is_server_error:
                        raise httpx.HTTPStatusError(
                            _describe_error(response), request=response.request, response=response
                        )

                    if not is_valid_json(response.text):
                        raise CommitteeAPIError("Response is not valid JSON (HTML or unstructured content received)")
                    return response.json()

                except httpx.TimeoutException as e:
                    error: Exception = CommitteeAPIError(f"Committee API timeout after {self.timeout}s")
                    cause: Exception = e
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise
                    error, cause = CommitteeAPIError(str(e)), e
                except httpx.RequestError as e:
                    error, cause = CommitteeAPIError(f"Cannot reach committee API: {e}"), e

                attempt += 1
                if attempt >= self.max_retries:
                    raise error from cause

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logging.warning(
                    "Retrying committee API call",
                    extra={"method": method, "path": path, "attempt": attempt, "backoff": backoff},
                )
                await asyncio.sleep(backoff)


def _describe_error(response: httpx.Response) -> str:
    if response.text.strip().startswith("<"):
        return f"Server returned an HTML error (status {response.status_code}), possibly a redirect or misconfiguration"
    return f"Server error: {response.status_code}"
