"""
Preference sources: where the user's level and language come from.

The aggregation core only ever calls ``read()``. ``JsonPreferenceStore.write``
exists for the CLI's ``prefs set`` command.

File layout::

    {"preferences": {"level": 150, "language": "fr"}}

Older files kept one top-level key per setting, with the level possibly stored
as a string (``{"level": "120", "language": "en"}``). Those are still read; an
unparsable level keeps the default.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Protocol

from dofus_almanax.models.preferences import Preferences

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


class PreferenceSource(Protocol):
    """Synchronous, read-only view of the user's preferences."""

    def read(self) -> Preferences: ...


class StaticPreferenceSource:
    """Fixed in-memory preferences (CLI overrides, tests)."""

    def __init__(self, preferences: Optional[Preferences] = None) -> None:
        self._preferences = preferences or Preferences()

    def read(self) -> Preferences:
        return self._preferences


class JsonPreferenceStore:
    """Preferences persisted in a small JSON file.

    Args:
        path:     JSON file location; it need not exist yet.
        defaults: Values used for any setting never chosen by the user.
    """

    def __init__(self, path: Path | str, defaults: Optional[Preferences] = None) -> None:
        self.path = Path(path)
        self.defaults = defaults or Preferences()

    def read(self) -> Preferences:
        if not self.path.exists():
            return self.defaults

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return self.defaults
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self.path)
            return self.defaults

        stored = data.get("preferences")
        if not isinstance(stored, dict):
            stored = data  # legacy one-key-per-setting layout
        return Preferences(
            level=_coerce_level(stored.get("level"), self.defaults.level),
            language=_coerce_language(stored.get("language"), self.defaults.language),
        )

    def write(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"preferences": preferences.model_dump()}
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Preferences saved to %s", self.path)


def _coerce_level(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        # leading digits only: "120abc" -> 120, "12.5" -> 12
        match = _LEADING_INT.match(value)
        return int(match.group(), 10) if match else default
    return default


def _coerce_language(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default
