"""
REST HTTP client for the platform's developer API.
"""

from typing import Any, Optional

import httpx

from pi_demo.errors import GatewayError

DEFAULT_BASE_URL = "https://socialchain.app"
DEFAULT_TIMEOUT_S = 20.0


class HttpClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/v2",
            headers={"User-Agent": "pi-demo/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        # Credential is sent as configured, e.g. "Key <server api key>"
        return {"Content-Type": "application/json", "Authorization": self._api_key}

    async def _send(self, method: str, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=body, headers=self._auth_headers())
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {path} failed: {e}", code="transport_error")
        if resp.status_code >= 400:
            raise GatewayError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status_code": resp.status_code, "path": path},
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise GatewayError(
                f"{method} {path} returned a non-JSON body: {e}",
                code="invalid_response",
                details={"status_code": resp.status_code, "path": path},
            )

    async def get(self, path: str) -> Any:
        return await self._send("GET", path)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return await self._send("POST", path, body if body is not None else {})

    async def close(self) -> None:
        await self._client.aclose()
