"""Tests for content decoders and the request wrapper."""

import pytest

from hookgate.core.exceptions import DecodeError
from hookgate.webhooks.content import ContentDecoders, decode_form, decode_json, media_type
from hookgate.webhooks.request import WebhookRequest


class TestMediaType:
    def test_strips_parameters(self):
        assert media_type("application/json; charset=utf-8") == "application/json"

    def test_lowercases(self):
        assert media_type(" Application/JSON ") == "application/json"


class TestDecoders:
    def test_json(self):
        assert decode_json(b'{"a":1}') == {"a": 1}

    def test_json_error(self):
        with pytest.raises(DecodeError, match="Invalid JSON payload"):
            decode_json(b"{")

    def test_json_invalid_utf8(self):
        with pytest.raises(DecodeError):
            decode_json(b'"\xff"')

    def test_form(self):
        assert decode_form(b"payload=%7B%22a%22%3A1%7D") == {"a": 1}

    def test_form_without_payload_field(self):
        with pytest.raises(DecodeError, match="'payload'"):
            decode_form(b"other=1")

    def test_form_with_bad_json(self):
        with pytest.raises(DecodeError, match="Invalid JSON payload"):
            decode_form(b"payload=nope")


class TestContentDecoders:
    def test_default_registry(self):
        decoders = ContentDecoders.default()
        assert "application/json" in decoders
        assert "application/x-www-form-urlencoded" in decoders
        assert len(decoders) == 2

    def test_select_ignores_parameters(self):
        decoders = ContentDecoders.default()
        assert decoders.select("application/json; charset=utf-8") is decode_json

    def test_select_falls_back_when_undeclared(self):
        decoders = ContentDecoders({"text/plain": bytes.decode}, default_content_type="text/plain")
        assert decoders.select(None) is bytes.decode
        assert decoders.select("") is bytes.decode

    def test_no_decoder(self):
        decoders = ContentDecoders.default()
        assert decoders.select("application/xml") is None
        assert decoders.select(None) is None
        with pytest.raises(LookupError):
            decoders.decode("application/xml", b"<a/>")

    def test_register_replaces(self):
        decoders = ContentDecoders.default().register("Application/JSON", lambda body: "custom")
        assert decoders.decode("application/json", b"{}") == "custom"

    def test_content_types(self):
        decoders = ContentDecoders().register("text/plain", bytes.decode)
        assert decoders.content_types == ["text/plain"]
        assert list(decoders) == ["text/plain"]


class TestWebhookRequest:
    def test_headers_are_case_insensitive(self):
        request = WebhookRequest(headers={"X-GitHub-Event": "push"})
        assert request.header("x-github-event") == "push"
        assert request.header("X-GITHUB-EVENT") == "push"

    def test_raw_byte_headers(self):
        request = WebhookRequest(headers=[(b"content-type", b"application/json")])
        assert request.content_type == "application/json"

    def test_method_upper(self):
        assert WebhookRequest(method="post").method == "POST"

    @pytest.mark.asyncio
    async def test_body_reader_called_once(self):
        calls = 0

        async def reader() -> bytes:
            nonlocal calls
            calls += 1
            return b"raw"

        request = WebhookRequest(body_reader=reader)
        assert request.body_consumed is False
        assert await request.body() == b"raw"
        assert await request.body() == b"raw"
        assert calls == 1
        assert request.body_consumed is True

    @pytest.mark.asyncio
    async def test_in_memory_body_is_not_consumed_until_read(self):
        request = WebhookRequest(body=b"x")
        assert request.body_consumed is False
        assert await request.body() == b"x"
        assert request.body_consumed is True

    @pytest.mark.asyncio
    async def test_empty_body(self):
        assert await WebhookRequest().body() == b""

    def test_body_and_reader_are_exclusive(self):
        async def reader() -> bytes:
            return b""

        with pytest.raises(ValueError):
            WebhookRequest(body=b"x", body_reader=reader)
