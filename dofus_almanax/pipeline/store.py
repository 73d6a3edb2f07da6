"""
Last-known almanax list for display.

The aggregator itself keeps no state. ``AlmanaxStore`` is the explicit holder
a rendering layer uses to keep showing the previous list (initially empty)
when a refresh hits a fatal error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from dofus_almanax.errors import AlmanaxError
from dofus_almanax.models.almanax import AlmanaxEntry

if TYPE_CHECKING:
    from dofus_almanax.pipeline.aggregator import Aggregator

logger = logging.getLogger(__name__)


class AlmanaxStore:
    """Holds the most recent successful aggregation result."""

    def __init__(self) -> None:
        self._entries: list[AlmanaxEntry] = []
        self.last_error: Optional[AlmanaxError] = None
        self._generation = 0

    @property
    def entries(self) -> list[AlmanaxEntry]:
        return list(self._entries)

    async def refresh(
        self, aggregator: "Aggregator", level: int, language: Optional[str] = None
    ) -> list[AlmanaxEntry]:
        """Re-aggregate; keep the previous list if the aggregation fails.

        Only ``FetchFailure`` and ``ValidationFailure`` are absorbed here; they
        are kept in ``last_error`` for the caller to report.

        When refreshes overlap, only the most recently started one updates the
        store; an older one finishing late returns the current entries.
        """
        self._generation += 1
        generation = self._generation
        try:
            entries = await aggregator.aggregate(level, language)
        except AlmanaxError as exc:
            if generation != self._generation:
                logger.debug("Discarding failure of superseded refresh: %s", exc)
                return self.entries
            logger.warning("Almanax refresh failed, keeping %d previous entries: %s",
                           len(self._entries), exc)
            self.last_error = exc
            return self.entries

        if generation != self._generation:
            logger.debug("Discarding result of superseded refresh (level=%d)", level)
            return self.entries

        self._entries = entries
        self.last_error = None
        return self.entries
