"""
Almanax aggregation: primary fetch → validation → image enrichment → merge.

Flow
----
1. Fetch the 7-day window from the primary provider (``FetchFailure`` is fatal).
2. Validate it (``ValidationFailure`` is fatal).
3. For every day, concurrently, look up the secondary provider's image for the
   tribute item. Lookups soft-fail to ``None`` and never abort the batch.
4. Fold each day through the image fallback chain and flatten it into an
   ``AlmanaxEntry``, keeping the primary provider's order.

Image fallback chain (first non-empty wins)::

    secondary hd → primary hd → primary sd → ""

Two enrichment modes:
  search  one item search per day, exact ``ankama_id`` match required (default).
  index   the secondary provider's own almanax window is fetched alongside
          the primary one and matched by position.

Every call is self-contained: no state survives between invocations, so
overlapping aggregations (e.g. quick preference changes) cannot interfere.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

import httpx

from dofus_almanax.ingestion.image_resolver import ImageResolver
from dofus_almanax.ingestion.primary_client import PrimaryDataClient
from dofus_almanax.ingestion.validation import validate_primary
from dofus_almanax.models.almanax import AlmanaxEntry, RawPrimaryRecord, parse_iso_datetime

if TYPE_CHECKING:
    from dofus_almanax.config import AppConfig
    from dofus_almanax.preferences import PreferenceSource

logger = logging.getLogger(__name__)


class AggregationMode(str, Enum):
    """How secondary images are matched to primary days."""

    SEARCH = "search"
    INDEX  = "index"


# ── Pure merge helpers ────────────────────────────────────────────────────────


def pick_image(*candidates: Optional[str]) -> str:
    """Return the first non-empty candidate, or ``""``."""
    return next((c for c in candidates if c), "")


def truncate_date(value: str) -> str:
    """Keep the calendar-date part of an ISO date-time as written.

    The time of day and the UTC offset are dropped without converting
    between zones: ``"2024-03-01T23:30:00-05:00"`` → ``"2024-03-01"``.
    """
    return parse_iso_datetime(value).date().isoformat()


def build_entry(record: RawPrimaryRecord, secondary_hd: Optional[str]) -> AlmanaxEntry:
    """Merge one validated primary day with its (possibly missing) secondary image."""
    item = record.item
    return AlmanaxEntry(
        description=record.bonus.description,
        bonus=record.bonus.type.name,
        bonus_id=record.bonus.type.id,
        date=truncate_date(record.date),
        image=pick_image(secondary_hd, item.image_urls.hd, item.image_urls.sd),
        loot=item.name,
        loot_id=item.ankama_id,
        quantity=record.tribute.quantity,
        reward_kamas=record.reward_kamas,
        reward_xp=record.reward_xp,
        subtype=item.subtype,
    )


# ── Aggregator ────────────────────────────────────────────────────────────────


class Aggregator:
    """Orchestrates the primary client, validator and image resolver.

    Attributes:
        primary:  Source of the raw almanax window.
        resolver: Secondary image lookup; must never raise.
        mode:     Enrichment strategy, see ``AggregationMode``.
    """

    def __init__(
        self,
        primary: PrimaryDataClient,
        resolver: ImageResolver,
        mode: AggregationMode = AggregationMode.SEARCH,
    ) -> None:
        self.primary = primary
        self.resolver = resolver
        self.mode = AggregationMode(mode)

    @classmethod
    def from_config(
        cls,
        config: "AppConfig",
        http_client: Optional[httpx.AsyncClient] = None,
        mode: AggregationMode = AggregationMode.SEARCH,
    ) -> "Aggregator":
        """Build an aggregator whose clients share one ``httpx.AsyncClient``."""
        api = config.api
        source_language = config.preferences.default_language
        return cls(
            primary=PrimaryDataClient(
                base_url=api.primary_base_url,
                range_size=api.range_size,
                timeout=api.timeout_seconds,
                http_client=http_client,
                source_language=source_language,
            ),
            resolver=ImageResolver(
                base_url=api.secondary_base_url,
                timeout=api.timeout_seconds,
                http_client=http_client,
                source_language=source_language,
            ),
            mode=mode,
        )

    async def aggregate(self, level: int, language: Optional[str] = None) -> list[AlmanaxEntry]:
        """Fetch, validate and enrich the almanax window.

        Returns:
            One ``AlmanaxEntry`` per primary day, in primary order.

        Raises:
            FetchFailure:      Primary provider unreachable or non-2xx.
            ValidationFailure: Primary response does not match the schema.
        """
        if self.mode is AggregationMode.INDEX:
            records, images = await self._fetch_indexed(level, language)
        else:
            raw = await self.primary.fetch(level, language)
            records = validate_primary(raw)
            images = await asyncio.gather(
                *(
                    self.resolver.resolve(r.item.name, r.item.ankama_id, language)
                    for r in records
                )
            )

        entries = [build_entry(record, image) for record, image in zip(records, images)]
        logger.info(
            "Aggregated %d almanax entries (level=%d, language=%s, %d secondary images)",
            len(entries), level, language or self.primary.source_language,
            sum(1 for image in images if image),
        )
        return entries

    async def aggregate_from_preferences(self, source: "PreferenceSource") -> list[AlmanaxEntry]:
        """Aggregate with the level and language currently held by ``source``."""
        prefs = source.read()
        return await self.aggregate(prefs.level, prefs.language)

    async def _fetch_indexed(
        self, level: int, language: Optional[str]
    ) -> tuple[list[RawPrimaryRecord], list[Optional[str]]]:
        """Issue both window fetches together and align images by position."""
        raw, secondary = await asyncio.gather(
            self.primary.fetch(level, language),
            self.resolver.fetch_almanax_images(language, self.primary.range_size),
            return_exceptions=True,
        )
        if isinstance(raw, BaseException):
            raise raw
        if isinstance(secondary, BaseException):
            raise secondary
        records = validate_primary(raw)
        images = list(secondary[: len(records)])
        images.extend([None] * (len(records) - len(images)))
        return records, images


# ── Synchronous entry point ───────────────────────────────────────────────────


def run_aggregation(
    config: "AppConfig",
    level: int,
    language: Optional[str] = None,
    mode: AggregationMode = AggregationMode.SEARCH,
) -> list[AlmanaxEntry]:
    """Run one aggregation on a fresh event loop with a shared HTTP client."""

    async def _run() -> list[AlmanaxEntry]:
        async with httpx.AsyncClient(timeout=config.api.timeout_seconds) as http:
            aggregator = Aggregator.from_config(config, http_client=http, mode=mode)
            return await aggregator.aggregate(level, language)

    return asyncio.run(_run())
