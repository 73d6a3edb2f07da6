"""
Shared pytest fixtures for the almanax aggregator test suite.

Provides:
  - ``make_day``: factory for primary-provider day payloads (wire format).
  - ``gobball_day``: the single-day payload used by end-to-end scenarios.
  - ``mock_http``: factory building an ``httpx.AsyncClient`` over a
    ``httpx.MockTransport``, so no test ever touches the network.
  - ``app_config``: an ``AppConfig`` with default endpoints.
"""

from __future__ import annotations

import copy
from typing import Any, Callable

import httpx
import pytest

from dofus_almanax.config import AppConfig


def build_day(
    item_name: str = "Gobball Wool",
    ankama_id: int = 42,
    date: str = "2024-05-01T00:00:00+00:00",
    sd: str | None = "s.png",
    hd: str | None = "h.png",
    **overrides: Any,
) -> dict:
    """Return one primary almanax day as sent on the wire."""
    image_urls = {}
    if sd is not None:
        image_urls["sd"] = sd
    if hd is not None:
        image_urls["hd"] = hd
    day = {
        "bonus": {
            "type": {"name": "Pet's", "id": "8"},
            "description": "Pets gain twice as much experience.",
        },
        "date": date,
        "tribute": {
            "item": {
                "name": item_name,
                "image_urls": image_urls,
                "subtype": "Resource",
                "ankama_id": ankama_id,
            },
            "quantity": 10,
        },
        "reward_kamas": 500,
        "reward_xp": 1000,
    }
    day.update(overrides)
    return day


@pytest.fixture
def make_day() -> Callable[..., dict]:
    return build_day


@pytest.fixture
def gobball_day() -> dict:
    return copy.deepcopy(build_day())


@pytest.fixture
def week(make_day) -> list[dict]:
    """Seven days with distinct items, ids 100..106, in date order."""
    return [
        make_day(
            item_name=f"Item {i}",
            ankama_id=100 + i,
            date=f"2024-05-0{i + 1}T00:00:00+02:00",
            sd=f"sd{i}.png",
            hd=f"hd{i}.png",
        )
        for i in range(7)
    ]


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an ``AsyncClient`` whose requests are answered by ``handler``."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()
