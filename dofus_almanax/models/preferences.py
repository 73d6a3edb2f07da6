"""
User preference model: the two parameters that shape an almanax fetch.

Preferences are owned by an external store (see ``dofus_almanax.preferences``);
the aggregation core only reads them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

DEFAULT_LEVEL = 150

# Fallback locale used whenever no language is supplied.
SOURCE_LANGUAGE = "fr"


class Preferences(BaseModel):
    """Character level and language chosen by the user.

    Attributes:
        level: Minimum character level used to scale almanax rewards.
        language: Two-letter language code of the provider collection.
    """

    model_config = ConfigDict(frozen=True)

    level: int = DEFAULT_LEVEL
    language: str = SOURCE_LANGUAGE
