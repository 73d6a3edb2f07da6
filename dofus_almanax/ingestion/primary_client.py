"""
Primary provider client: dofusdu.de Dofus 3 almanax endpoint.

API:   https://api.dofusdu.de/dofus3/v1
Docs:  https://docs.dofusdu.de

Endpoint::

    GET /{language}/almanax?range[size]=7&level={level}

Returns a JSON array, one object per upcoming day, oldest first. The body is
returned undecoded into models: validation is the job of
``dofus_almanax.ingestion.validation``.

One attempt per call: no retry, no backoff. Any transport error, non-2xx
status, or non-JSON body raises ``FetchFailure``.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

import httpx

from dofus_almanax.errors import FetchFailure
from dofus_almanax.models.preferences import SOURCE_LANGUAGE

logger = logging.getLogger(__name__)


def almanax_url(base_url: str, language: str, level: int, range_size: int = 7) -> str:
    """Build the fully encoded almanax URL for one language/level window."""
    url = httpx.URL(
        f"{base_url.rstrip('/')}/{language}/almanax",
        params={"range[size]": range_size, "level": level},
    )
    return str(url)


class PrimaryDataClient:
    """Async client for the primary almanax provider.

    Usage::

        async with httpx.AsyncClient() as http:
            client = PrimaryDataClient(http_client=http)
            raw = await client.fetch(level=150, language="en")

    Without ``http_client`` each ``fetch`` opens and closes its own
    ``httpx.AsyncClient``.
    """

    DEFAULT_BASE_URL: ClassVar[str] = "https://api.dofusdu.de/dofus3/v1"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        range_size: int = 7,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        source_language: str = SOURCE_LANGUAGE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.range_size = range_size
        self.timeout = timeout
        self.source_language = source_language
        self._http = http_client

    async def fetch(self, level: int, language: Optional[str] = None) -> Any:
        """Fetch the raw almanax window for ``level`` in ``language``.

        Args:
            level:    Minimum character level used to scale rewards.
            language: Collection language; falls back to the source language
                      when ``None`` or empty.

        Returns:
            The decoded JSON body, unvalidated.

        Raises:
            FetchFailure: On transport error, non-2xx status, or non-JSON body.
        """
        url = almanax_url(self.base_url, language or self.source_language, level, self.range_size)
        logger.debug("Fetching primary almanax: %s", url)

        if self._http is not None:
            return await self._get_json(self._http, url)
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            return await self._get_json(http, url)

    async def _get_json(self, http: httpx.AsyncClient, url: str) -> Any:
        try:
            resp = await http.get(url, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.warning("Primary provider unreachable: %s", exc)
            raise FetchFailure(url, f"{type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            logger.warning("Primary provider returned HTTP %d for %s", resp.status_code, url)
            raise FetchFailure(url, f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise FetchFailure(url, "response body is not JSON", status_code=resp.status_code) from exc
