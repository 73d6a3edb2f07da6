"""
Schema validation boundary between untyped provider JSON and typed records.

``validate_primary`` is the single point where primary-provider data becomes
trusted. It never fills defaults for required fields: any structural mismatch
raises ``ValidationFailure`` with the dotted path of the first offending field
(array index first, e.g. ``"3.tribute.item.ankama_id"``).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from dofus_almanax.errors import ValidationFailure
from dofus_almanax.models.almanax import RawPrimaryRecord, RawSecondaryRecord

logger = logging.getLogger(__name__)

_PRIMARY_LIST = TypeAdapter(list[RawPrimaryRecord])
_SECONDARY_HITS = TypeAdapter(list[Any])


def error_path(loc: tuple) -> str:
    """Render a pydantic error location as a dotted path (``"$"`` for root)."""
    return ".".join(str(part) for part in loc) or "$"


def validate_primary(raw: Any) -> list[RawPrimaryRecord]:
    """Validate the primary provider's almanax response.

    Args:
        raw: Decoded JSON body, expected to be an array of day objects.

    Returns:
        Typed records in response order.

    Raises:
        ValidationFailure: On the first missing required field or wrong type.
    """
    try:
        records = _PRIMARY_LIST.validate_python(raw)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0]
        path = error_path(first["loc"])
        logger.warning(
            "Primary response rejected: %d error(s), first at %s (%s)",
            len(errors), path, first["msg"],
        )
        raise ValidationFailure(path, first["msg"]) from exc

    logger.debug("Primary response validated: %d record(s)", len(records))
    return records


def validate_secondary(raw: Any) -> Optional[RawSecondaryRecord]:
    """Validate a secondary item-search response and return its first hit.

    Returns ``None`` for an empty result list. Only the first hit is
    validated; later hits are never used.

    Raises:
        pydantic.ValidationError: If the body is not a list or its first hit
            is malformed.
    """
    hits = _SECONDARY_HITS.validate_python(raw)
    if not hits:
        return None
    return RawSecondaryRecord.model_validate(hits[0])
