"""HTTP client for the RapidAPI-hosted Google Places "find place from text" API.

Usage:
    client = PlacesClient(settings)
    candidates = await client.find_candidates("Cairo Tower")
    await client.close()

Candidates are returned as raw provider dictionaries. A response whose
status is not "OK" (for example "ZERO_RESULTS") yields an empty list.
Transport and HTTP errors raise PlaceLookupError; no retries are attempted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from signalwatch.core.exceptions import PlaceLookupError
from signalwatch.core.logging import get_logger, sanitize_error

if TYPE_CHECKING:
    from signalwatch.core.config import Settings

logger = get_logger(__name__)

FIND_PLACE_PATH = "/maps/api/place/findplacefromtext/json"


class PlacesClient:
    """Async client for the place search provider."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Application settings with the RapidAPI key, host and timeout
            transport: Optional httpx transport, used by tests to stub the provider
        """
        self.settings = settings
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return f"https://{self.settings.rapidapi_host}"

    def is_configured(self) -> bool:
        return bool(self.settings.rapidapi_key)

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.settings.places_timeout_seconds),
                transport=self._transport,
                headers={
                    "X-RapidAPI-Key": self.settings.rapidapi_key or "",
                    "X-RapidAPI-Host": self.settings.rapidapi_host,
                },
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def find_candidates(self, text: str) -> list[dict[str, Any]]:
        """Search places matching free text.

        Raises:
            PlaceLookupError: The provider is not configured, unreachable,
                timed out, answered with an HTTP error or returned invalid JSON.
        """
        if not self.is_configured():
            raise PlaceLookupError("Place lookup is not configured (missing RapidAPI key)")

        params = {
            "input": text,
            "inputtype": "textquery",
            "fields": "all",
            "language": "en",
        }
        client = await self._get_http_client()
        try:
            response = await client.get(FIND_PLACE_PATH, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            logger.warning(
                f"Place lookup timed out: {sanitize_error(e)}",
                extra={"operation": "find_place", "error_type": type(e).__name__},
            )
            raise PlaceLookupError("Place lookup timed out") from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                f"Place lookup failed (HTTP {status_code})",
                extra={"operation": "find_place", "status_code": status_code},
            )
            raise PlaceLookupError(details={"status_code": status_code}) from e
        except httpx.HTTPError as e:
            logger.warning(
                f"Place lookup connection failed: {sanitize_error(e)}",
                extra={"operation": "find_place", "error_type": type(e).__name__},
            )
            raise PlaceLookupError() from e
        except ValueError as e:
            logger.error(f"Place lookup returned invalid JSON: {sanitize_error(e)}")
            raise PlaceLookupError("Place lookup returned an invalid response") from e

        if not isinstance(payload, dict):
            raise PlaceLookupError("Place lookup returned an invalid response")

        status = payload.get("status")
        candidates = payload.get("candidates") or []
        if status != "OK" or not candidates:
            logger.info(f"Place lookup returned no candidates (status={status})")
            return []
        return [c for c in candidates if isinstance(c, dict)]


_places_client: PlacesClient | None = None


def get_places_client(settings: Settings) -> PlacesClient:
    """Get or create the process-wide PlacesClient, sharing one connection pool."""
    global _places_client  # noqa: PLW0603
    if _places_client is None:
        _places_client = PlacesClient(settings)
    return _places_client


async def close_places_client() -> None:
    """Close and drop the process-wide PlacesClient."""
    global _places_client  # noqa: PLW0603
    if _places_client is not None:
        await _places_client.close()
        _places_client = None
