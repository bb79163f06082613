"""Shared HTTP plumbing for vendor cloud and bridge clients."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..constants import VENDOR_TIMEOUT_DEFAULT
from ..errors import DeviceTimeoutError, NetworkError, VendorAPIError

logger = logging.getLogger(__name__)


class VendorClient:
    """Base for vendor clients.

    Subclasses call ``_request_json``; transport failures surface as
    NetworkError or DeviceTimeoutError and non-2xx responses as VendorAPIError.
    """

    vendor = "vendor"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = VENDOR_TIMEOUT_DEFAULT,
    ):
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _bearer_headers(token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        client = await self._get_client()
        try:
            return await client.request(method, url, headers=headers, json=json, params=params)
        except httpx.TimeoutException as exc:
            raise DeviceTimeoutError(url, self.timeout, cause=exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(url, cause=exc) from exc

    async def _request_json(self, method: str, url: str, action: str, **kwargs: Any) -> Any:
        """Issue a request and return its decoded JSON body.

        Args:
            action: Short description used in error messages (e.g. "get lights")

        Returns:
            Decoded JSON, or None for an empty body
        """
        response = await self._request(method, url, **kwargs)
        if not response.is_success:
            logger.error(
                "[%s] Failed to %s: HTTP %s", self.vendor, action, response.status_code
            )
            raise VendorAPIError(
                self.vendor,
                f"Failed to {action}: {response.reason_phrase}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise VendorAPIError(
                self.vendor,
                f"Failed to {action}: response is not JSON",
                status_code=response.status_code,
            ) from exc


__all__ = ["VendorClient"]
