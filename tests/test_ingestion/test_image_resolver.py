"""
Tests for dofus_almanax.ingestion.image_resolver.

Every failure mode must resolve to ``None`` without raising.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from dofus_almanax.ingestion.image_resolver import ImageResolver


def _resolve(mock_http, handler, name="Gobball Wool", item_id=42, language="fr"):
    async def run():
        async with mock_http(handler) as http:
            return await ImageResolver(http_client=http).resolve(name, item_id, language)

    return asyncio.run(run())


def _json(body, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    return handler


class TestResolve:
    def test_exact_match_returns_hd(self, mock_http):
        handler = _json([{"ankama_id": 42, "image_urls": {"hd": "d2-hd.png", "sd": "d2.png"}}])
        assert _resolve(mock_http, handler) == "d2-hd.png"

    def test_request_shape(self, mock_http):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        _resolve(mock_http, handler, name="Bwork's Ear", language="es")
        url = seen[0].url
        assert url.path == "/dofus2/es/items/search"
        assert url.params["query"] == "Bwork's Ear"
        assert url.params["limit"] == "1"

    def test_missing_language_uses_source_language(self, mock_http):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        _resolve(mock_http, handler, language=None)
        assert seen[0].url.path == "/dofus2/fr/items/search"

    def test_id_mismatch_is_none(self, mock_http):
        handler = _json([{"ankama_id": 7, "image_urls": {"hd": "other.png"}}])
        assert _resolve(mock_http, handler) is None

    def test_empty_result_is_none(self, mock_http):
        assert _resolve(mock_http, _json([])) is None

    def test_missing_hd_is_none(self, mock_http):
        handler = _json([{"ankama_id": 42, "image_urls": {"sd": "only-sd.png"}}])
        assert _resolve(mock_http, handler) is None

    def test_empty_hd_is_none(self, mock_http):
        handler = _json([{"ankama_id": 42, "image_urls": {"hd": ""}}])
        assert _resolve(mock_http, handler) is None

    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_http_error_status_is_none(self, mock_http, status):
        assert _resolve(mock_http, _json({"error": "x"}, status=status)) is None

    def test_transport_error_is_none(self, mock_http):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        assert _resolve(mock_http, handler) is None

    def test_non_json_is_none(self, mock_http):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="oops")

        assert _resolve(mock_http, handler) is None

    def test_malformed_body_is_none(self, mock_http):
        assert _resolve(mock_http, _json({"items": [{"ankama_id": 42}]})) is None
        assert _resolve(mock_http, _json([{"ankama_id": "42"}])) is None

    def test_malformed_second_hit_does_not_hide_first(self, mock_http):
        handler = _json([{"ankama_id": 42, "image_urls": {"hd": "d2-hd.png"}}, {"name": "junk"}])
        assert _resolve(mock_http, handler) == "d2-hd.png"

    def test_miss_reason_logged(self, mock_http, caplog):
        handler = _json([{"ankama_id": 7, "image_urls": {"hd": "other.png"}}])
        with caplog.at_level(logging.DEBUG, logger="dofus_almanax.ingestion.image_resolver"):
            _resolve(mock_http, handler)
        assert "id_mismatch" in caplog.text


class TestFetchAlmanaxImages:
    def _run(self, mock_http, handler, language="fr"):
        async def run():
            async with mock_http(handler) as http:
                return await ImageResolver(http_client=http).fetch_almanax_images(language)

        return asyncio.run(run())

    def test_positional_images(self, mock_http):
        body = [
            {"tribute": {"item": {"image_urls": {"hd": "a.png"}}}},
            {"tribute": {"item": {"image_urls": {}}}},
            {"tribute": None},
            "garbage",
        ]
        assert self._run(mock_http, _json(body)) == ["a.png", None, None, None]

    def test_request_shape(self, mock_http):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        self._run(mock_http, handler, language="pt")
        assert seen[0].url.path == "/dofus2/pt/almanax"
        assert seen[0].url.params["range[size]"] == "7"

    def test_failure_is_empty_list(self, mock_http):
        assert self._run(mock_http, _json({}, status=500)) == []
        assert self._run(mock_http, _json({"not": "a list"})) == []
