import logging
from typing import Any

import httpx

from .config import get_settings
from .errors import ApiError

logger = logging.getLogger(__name__)


def extract_error_message(payload: Any, fallback: str) -> str:
    """
    Pick a readable message out of an error body: `message`, then `detail`,
    then field errors such as {"phone": ["already exists"]} joined with "; ".
    """
    if isinstance(payload, dict):
        for key in ("message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
        parts: list[str] = []
        for value in payload.values():
            if isinstance(value, list):
                parts.extend(str(v) for v in value)
            elif isinstance(value, str):
                parts.append(value)
        if parts:
            return "; ".join(parts)
    elif isinstance(payload, str) and payload:
        return payload
    return fallback


class CrmApiClient:
    """Thin async wrapper around the CRM backend's JSON API."""

    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
        error_message: str = "Request failed",
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise ApiError(None, "Request timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(None, str(exc) or error_message) from exc

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = extract_error_message(payload, error_message)
            logger.info("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message, payload)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, "Invalid JSON response") from exc

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()


def get_api_client(transport: httpx.AsyncBaseTransport | None = None) -> CrmApiClient:
    """
    Returns a client configured from settings. Each call opens a new
    connection pool; the owner is responsible for closing it.
    """
    settings = get_settings()
    return CrmApiClient(settings.CRM_API_BASE_URL, settings.REQUEST_TIMEOUT_SECONDS, transport=transport)
