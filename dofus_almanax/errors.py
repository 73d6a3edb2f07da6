"""
Fatal error types crossing the aggregation boundary.

Only ``FetchFailure`` and ``ValidationFailure`` ever reach callers of
``Aggregator.aggregate``. Secondary-provider misses are soft and stay inside
the image resolver (see ``dofus_almanax.ingestion.image_resolver.MissReason``).
"""

from __future__ import annotations

from typing import Optional


class AlmanaxError(RuntimeError):
    """Base class for fatal aggregation errors."""


class FetchFailure(AlmanaxError):
    """Raised when the primary provider cannot be reached or answers non-2xx.

    Attributes:
        url:         The requested URL.
        status_code: HTTP status, or ``None`` for transport errors.
    """

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Fetch failed for {url}: {reason}")


class ValidationFailure(AlmanaxError):
    """Raised when the primary response does not match the expected schema.

    Attributes:
        path:   Dotted path of the offending field, e.g. ``"0.reward_kamas"``.
                ``"$"`` designates the response root.
        detail: Validator message for that field.
    """

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid primary response at '{path}': {detail}")
