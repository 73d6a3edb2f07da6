"""Tests for dofus_almanax.reporting.formatters."""

from __future__ import annotations

import json

from dofus_almanax.models.almanax import AlmanaxEntry
from dofus_almanax.reporting.formatters import entries_to_json, format_entries_table


def _entry(**overrides) -> AlmanaxEntry:
    fields = dict(
        description="Pets gain twice as much experience.",
        bonus="Pet's",
        bonus_id="8",
        date="2024-05-01",
        image="h.png",
        loot="Gobball Wool",
        loot_id=42,
        quantity=10,
        reward_kamas=500,
        reward_xp=1000,
        subtype="Resource",
    )
    fields.update(overrides)
    return AlmanaxEntry(**fields)


class TestFormatEntriesTable:
    def test_empty(self):
        assert "No almanax entries" in format_entries_table([])

    def test_row_content(self):
        out = format_entries_table([_entry()])
        assert "2024-05-01" in out
        assert "Pet's" in out
        assert "10 x Gobball Wool" in out
        assert "500" in out
        assert "1000" in out
        assert "Pets gain twice" in out
        assert "Image:" not in out

    def test_rows_keep_order(self):
        out = format_entries_table([_entry(date="2024-05-02"), _entry(date="2024-05-01")])
        assert out.index("2024-05-02") < out.index("2024-05-01")

    def test_long_names_clipped(self):
        out = format_entries_table([_entry(loot="An Extraordinarily Long Resource Name Indeed")])
        assert "..." in out

    def test_images_line(self):
        out = format_entries_table([_entry(), _entry(image="")], show_images=True)
        assert "Image: h.png" in out
        assert "Image: (none)" in out


class TestEntriesToJson:
    def test_snake_case_keys(self):
        payload = json.loads(entries_to_json([_entry()]))
        assert payload == [_entry().model_dump()]
        assert payload[0]["bonus_id"] == "8"
        assert payload[0]["loot_id"] == 42

    def test_non_ascii_preserved(self):
        out = entries_to_json([_entry(loot="Laine de Bouftou Royal é")], indent=None)
        assert "é" in out
