"""
Secondary provider client: item images from the dofusdu.de Dofus 2 API.

API:   https://api.dofusdu.de/dofus2

Endpoints::

    GET /{language}/items/search?query={name}&limit=1
    GET /{language}/almanax?range[size]=7

The secondary provider is used only to find a better item image. Every
failure here is soft: methods return ``None`` (or an empty list) and log the
``MissReason`` at DEBUG. Nothing in this module raises to its caller.

Search hits are trusted only when their ``ankama_id`` equals the requested
item id; names collide across items, so a name-only match is a miss.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, ClassVar, Optional

import httpx
from pydantic import ValidationError

from dofus_almanax.ingestion.validation import validate_secondary
from dofus_almanax.models.preferences import SOURCE_LANGUAGE

logger = logging.getLogger(__name__)


class MissReason(str, Enum):
    """Why an enrichment lookup produced no image."""

    TRANSPORT   = "transport_error"
    HTTP_STATUS = "http_status"
    NOT_JSON    = "not_json"
    MALFORMED   = "malformed"
    NO_RESULT   = "no_result"
    ID_MISMATCH = "id_mismatch"
    NO_HD_IMAGE = "no_hd_image"


class ImageResolver:
    """Resolve high-definition item images from the secondary provider.

    Usage::

        async with httpx.AsyncClient() as http:
            resolver = ImageResolver(http_client=http)
            url = await resolver.resolve("Gobball Wool", 42, language="en")
    """

    DEFAULT_BASE_URL: ClassVar[str] = "https://api.dofusdu.de/dofus2"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        source_language: str = SOURCE_LANGUAGE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.source_language = source_language
        self._http = http_client

    async def resolve(
        self, item_name: str, item_id: int, language: Optional[str] = None
    ) -> Optional[str]:
        """Return the secondary ``hd`` image for an exact id match, else ``None``."""
        url = f"{self.base_url}/{language or self.source_language}/items/search"
        params = {"query": item_name, "limit": 1}

        body, reason = await self._get_json(url, params)
        if reason is not None:
            return self._miss(item_name, item_id, reason)

        try:
            hit = validate_secondary(body)
        except ValidationError:
            return self._miss(item_name, item_id, MissReason.MALFORMED)

        if hit is None:
            return self._miss(item_name, item_id, MissReason.NO_RESULT)
        if hit.ankama_id != item_id:
            return self._miss(item_name, item_id, MissReason.ID_MISMATCH)
        if not hit.image_urls.hd:
            return self._miss(item_name, item_id, MissReason.NO_HD_IMAGE)

        logger.debug("Secondary image resolved for %s (#%d)", item_name, item_id)
        return hit.image_urls.hd

    async def fetch_almanax_images(
        self, language: Optional[str] = None, range_size: int = 7
    ) -> list[Optional[str]]:
        """Fetch the secondary provider's own almanax window and list its images.

        The list is positional: element ``i`` is the ``hd`` image of day ``i``
        (``None`` where absent). Any failure yields an empty list.
        """
        url = f"{self.base_url}/{language or self.source_language}/almanax"
        body, reason = await self._get_json(url, {"range[size]": range_size})
        if reason is not None or not isinstance(body, list):
            logger.debug(
                "Secondary almanax unavailable (%s)",
                (reason or MissReason.MALFORMED).value,
            )
            return []
        return [_almanax_hd_image(day) for day in body]

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _get_json(
        self, url: str, params: dict[str, Any]
    ) -> tuple[Any, Optional[MissReason]]:
        if self._http is not None:
            return await self._request(self._http, url, params)
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            return await self._request(http, url, params)

    async def _request(
        self, http: httpx.AsyncClient, url: str, params: dict[str, Any]
    ) -> tuple[Any, Optional[MissReason]]:
        try:
            resp = await http.get(url, params=params, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.debug("Secondary request to %s failed: %s", url, exc)
            return None, MissReason.TRANSPORT
        if not resp.is_success:
            logger.debug("Secondary request to %s returned HTTP %d", url, resp.status_code)
            return None, MissReason.HTTP_STATUS
        try:
            return resp.json(), None
        except ValueError:
            return None, MissReason.NOT_JSON

    @staticmethod
    def _miss(item_name: str, item_id: int, reason: MissReason) -> None:
        logger.debug("No secondary image for %s (#%d): %s", item_name, item_id, reason.value)
        return None


def _almanax_hd_image(day: Any) -> Optional[str]:
    """Dig ``tribute.item.image_urls.hd`` out of a loosely shaped day object."""
    node = day
    for key in ("tribute", "item", "image_urls", "hd"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and node else None
