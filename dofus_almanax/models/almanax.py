"""
Almanax models: raw provider payloads and the canonical merged entry.

Two-stage design:
  1. ``RawPrimaryRecord`` / ``RawSecondaryRecord``: data exactly as received
     from the providers (snake_case field names as sent on the wire).
     String and integer fields are strict: ``"500"`` is not accepted where an
     integer is expected, so upstream API drift surfaces as a validation error
     rather than as silently coerced values.
  2. ``AlmanaxEntry``: the flattened record handed to the rendering layer.

All models are frozen (immutable) after construction. Unknown fields are
ignored; the providers return far more than is consumed here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class ImageUrls(BaseModel):
    """Image variants published for an item. Every variant is optional."""

    model_config = ConfigDict(frozen=True)

    sd: Optional[StrictStr] = None
    hd: Optional[StrictStr] = None


class BonusType(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: StrictStr
    id: StrictStr


class Bonus(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: BonusType
    description: StrictStr = ""


class TributeItem(BaseModel):
    """The item offered to the almanax for the day.

    Attributes:
        name: Localised item name.
        subtype: Item category label (e.g. ``"Resource"``).
        ankama_id: Game-wide item identifier, stable across providers.
        image_urls: Image variants; the whole object may be absent or null.
    """

    model_config = ConfigDict(frozen=True)

    name: StrictStr
    subtype: StrictStr
    ankama_id: StrictInt
    image_urls: ImageUrls = ImageUrls()

    @field_validator("image_urls", mode="before")
    @classmethod
    def null_image_urls_is_empty(cls, v):
        return {} if v is None else v


class Tribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: TributeItem
    quantity: StrictInt = Field(ge=0)


class RawPrimaryRecord(BaseModel):
    """One almanax day as returned by the primary provider.

    Attributes:
        bonus: Bonus category (name + stable id) and description.
        date: ISO-8601 date-time string, kept verbatim.
        tribute: Item and quantity to offer.
        reward_kamas: Kamas granted on completion.
        reward_xp: Experience granted on completion (scaled by level).
    """

    model_config = ConfigDict(frozen=True)

    bonus: Bonus
    date: StrictStr
    tribute: Tribute
    reward_kamas: StrictInt = Field(ge=0)
    reward_xp: StrictInt = Field(ge=0)

    @field_validator("date")
    @classmethod
    def validate_iso_datetime(cls, v: str) -> str:
        try:
            if not _has_time_part(v):
                raise ValueError(v)
            parse_iso_datetime(v)
        except ValueError:
            raise ValueError(f"date must be an ISO-8601 date-time, got '{v}'.") from None
        return v

    @property
    def item(self) -> TributeItem:
        return self.tribute.item


class SecondaryImageUrls(BaseModel):
    model_config = ConfigDict(frozen=True)

    hd: Optional[StrictStr] = None


class RawSecondaryRecord(BaseModel):
    """First hit of the secondary provider's item search."""

    model_config = ConfigDict(frozen=True)

    ankama_id: StrictInt
    image_urls: SecondaryImageUrls = SecondaryImageUrls()

    @field_validator("image_urls", mode="before")
    @classmethod
    def null_image_urls_is_empty(cls, v):
        return {} if v is None else v


class AlmanaxEntry(BaseModel):
    """Canonical almanax day consumed by the rendering layer.

    ``image`` is the best available image URL, or ``""`` when no provider
    supplied one. ``date`` is a calendar date (``YYYY-MM-DD``).
    """

    model_config = ConfigDict(frozen=True)

    description: str
    bonus: str
    bonus_id: str
    date: str
    image: str
    loot: str
    loot_id: int
    quantity: int = Field(ge=0)
    reward_kamas: int = Field(ge=0)
    reward_xp: int = Field(ge=0)
    subtype: str


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date-time, accepting the ``Z`` UTC suffix."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _has_time_part(value: str) -> bool:
    # fromisoformat also takes bare dates ("2024-05-01", "20240501")
    return "T" in value.upper() or " " in value.strip()
