"""
Tests for dofus_almanax.ingestion.validation: the schema boundary.

Covers:
  - validate_primary(): typed output, order, required fields, optional images
  - ValidationFailure.path: index-prefixed dotted path, "$" for root errors
  - validate_secondary(): first hit or None
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dofus_almanax.errors import ValidationFailure
from dofus_almanax.ingestion.validation import validate_primary, validate_secondary


class TestValidatePrimary:
    def test_valid_week_keeps_order(self, week):
        records = validate_primary(week)
        assert [r.item.ankama_id for r in records] == list(range(100, 107))

    def test_empty_list_is_valid(self):
        assert validate_primary([]) == []

    def test_missing_reward_kamas_fails_with_path(self, gobball_day):
        del gobball_day["reward_kamas"]
        with pytest.raises(ValidationFailure) as exc_info:
            validate_primary([gobball_day])
        assert exc_info.value.path == "0.reward_kamas"

    def test_wrong_type_fails_with_nested_path(self, make_day):
        bad = make_day()
        bad["tribute"]["item"]["ankama_id"] = "42"
        with pytest.raises(ValidationFailure) as exc_info:
            validate_primary([make_day(), bad])
        assert exc_info.value.path == "1.tribute.item.ankama_id"

    @pytest.mark.parametrize(
        "path",
        [
            ("bonus", "type", "name"),
            ("bonus", "type", "id"),
            ("date",),
            ("tribute", "item", "name"),
            ("tribute", "item", "subtype"),
            ("tribute", "item", "ankama_id"),
            ("tribute", "quantity"),
            ("reward_xp",),
        ],
    )
    def test_each_required_field(self, gobball_day, path):
        node = gobball_day
        for key in path[:-1]:
            node = node[key]
        del node[path[-1]]
        with pytest.raises(ValidationFailure) as exc_info:
            validate_primary([gobball_day])
        assert exc_info.value.path == "0." + ".".join(path)

    def test_missing_optional_images_is_valid(self, make_day):
        records = validate_primary([make_day(sd=None, hd=None)])
        assert records[0].item.image_urls.sd is None
        assert records[0].item.image_urls.hd is None

    def test_null_image_object_is_valid(self, gobball_day):
        gobball_day["tribute"]["item"]["image_urls"] = None
        records = validate_primary([gobball_day])
        assert records[0].item.image_urls.sd is None
        assert records[0].item.image_urls.hd is None

    def test_non_list_root_fails_at_root(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_primary({"message": "not found"})
        assert exc_info.value.path == "$"

    def test_failure_message_names_path(self, gobball_day):
        gobball_day["reward_xp"] = None
        with pytest.raises(ValidationFailure, match="0.reward_xp"):
            validate_primary([gobball_day])


class TestValidateSecondary:
    def test_first_hit(self):
        hit = validate_secondary([{"ankama_id": 42, "image_urls": {"hd": "x.png"}}])
        assert hit is not None
        assert hit.ankama_id == 42
        assert hit.image_urls.hd == "x.png"

    def test_empty_is_none(self):
        assert validate_secondary([]) is None

    def test_malformed_raises_pydantic_error(self):
        with pytest.raises(ValidationError):
            validate_secondary({"items": []})

    def test_malformed_later_hit_ignored(self):
        hit = validate_secondary([
            {"ankama_id": 42, "image_urls": {"hd": "x.png"}},
            {"ankama_id": "not-an-int"},
        ])
        assert hit is not None
        assert hit.ankama_id == 42

    def test_malformed_first_hit_raises(self):
        with pytest.raises(ValidationError):
            validate_secondary([{"ankama_id": "42"}, {"ankama_id": 42}])
