"""
Tests for Router: route search, fatal vs. fall-through rejections,
handler argument order and response shaping.
"""

from unittest.mock import AsyncMock

import pytest

from hookgate.core.exceptions import ConfigurationError
from hookgate.core.types import EventKind
from hookgate.gates.base import Admit, Gate, GateStage, Rejection, RejectContinue
from hookgate.gates.context import RouteContext
from hookgate.gates.event import EventGate
from hookgate.gates.signature import SignatureGate
from hookgate.keys.base import SigningKeyProvider
from hookgate.routing.router import Response, Route, Router

from conftest import make_request, sign


class RecordingGate(Gate):
    """Admits a fixed value and records evaluation order."""

    def __init__(self, value, stage: GateStage, log: list) -> None:
        self.value = value
        self.stage = stage
        self.log = log

    async def check(self, request, context):
        self.log.append(self.value)
        return Admit(self.value)


class TestScenarios:
    """End-to-end behaviour of the two gates inside a route tree."""

    @pytest.mark.asyncio
    async def test_signed_body_is_forwarded(self, router):
        received = []

        @router.route("/hooks", gates=[SignatureGate()])
        async def handler(payload):
            received.append(payload)

        response = await router.dispatch(make_request(b'{"a":1}'))

        assert response.status_code == 204
        assert received == [{"a": 1}]

    @pytest.mark.asyncio
    async def test_bad_signature_does_not_fall_through(self, router):
        signed = AsyncMock(return_value={"route": "signed"})
        unsigned = AsyncMock(return_value={"route": "unsigned"})
        router.add_route("/hooks", signed, gates=[SignatureGate()], name="signed")
        router.add_route("/hooks", unsigned, name="unsigned")

        good = sign(b'{"a":1}')
        flipped = good[:-1] + ("0" if good[-1] != "0" else "1")
        response = await router.dispatch(make_request(signature=flipped))

        assert response.status_code == 401
        assert response.json_body() == {"detail": "Signature mismatch"}
        signed.assert_not_called()
        unsigned.assert_not_called()

    @pytest.mark.asyncio
    async def test_event_mismatch_tries_sibling_route(self, router):
        on_push = AsyncMock(return_value={"route": "push"})
        on_pr = AsyncMock(return_value={"route": "pull_request"})
        router.add_route("/hooks", on_push, gates=[EventGate([EventKind.PUSH])], name="push")
        router.add_route(
            "/hooks", on_pr, gates=[EventGate([EventKind.PULL_REQUEST])], name="pr"
        )

        push = await router.dispatch(make_request(event="push"))
        pr = await router.dispatch(make_request(event="pull_request"))

        assert push.json_body() == {"route": "push"}
        assert pr.json_body() == {"route": "pull_request"}
        on_push.assert_awaited_once_with(EventKind.PUSH)
        on_pr.assert_awaited_once_with(EventKind.PULL_REQUEST)

    @pytest.mark.asyncio
    async def test_unmatched_event_ends_in_404(self, router):
        router.add_route("/hooks", AsyncMock(), gates=[EventGate([EventKind.PUSH])])

        response = await router.dispatch(make_request(event="pull_request"))

        assert response.status_code == 404
        assert "pull_request" not in response.body.decode()

    @pytest.mark.asyncio
    async def test_missing_event_header_ends_in_404(self, router):
        router.add_route("/hooks", AsyncMock(), gates=[EventGate([EventKind.PUSH])])
        response = await router.dispatch(make_request(event=None))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wildcard_route_receives_concrete_kind(self, router):
        handler = AsyncMock(return_value=None)
        router.add_route("/hooks", handler, gates=[EventGate([EventKind.WILDCARD])])

        await router.dispatch(make_request(event="release"))

        handler.assert_awaited_once_with(EventKind.RELEASE)

    @pytest.mark.asyncio
    async def test_unsupported_media_is_fatal(self, router):
        fallback = AsyncMock()
        router.add_route("/hooks", AsyncMock(), gates=[SignatureGate()])
        router.add_route("/hooks", fallback)

        request = make_request(b"\x00\x01", content_type="application/octet-stream")
        response = await router.dispatch(request)

        assert response.status_code == 415
        fallback.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_body_is_fatal_400(self, router):
        fallback = AsyncMock()
        router.add_route("/hooks", AsyncMock(), gates=[SignatureGate()])
        router.add_route("/hooks", fallback)

        response = await router.dispatch(make_request(b"{oops"))

        assert response.status_code == 400
        assert response.json_body()["detail"].startswith("Invalid JSON payload")
        fallback.assert_not_called()


class TestComposition:
    @pytest.mark.asyncio
    async def test_event_and_payload_passed_in_declaration_order(self, router, push_payload):
        handler = AsyncMock(return_value={"ok": True})
        router.add_route("/hooks", handler, gates=[EventGate([EventKind.PUSH]), SignatureGate()])

        response = await router.dispatch(make_request(push_payload, event="push"))

        assert response.status_code == 200
        event, payload = handler.await_args.args
        assert event is EventKind.PUSH
        assert payload["ref"] == "refs/heads/main"

    @pytest.mark.asyncio
    async def test_event_checked_before_body_whatever_the_declaration_order(self, router):
        handler = AsyncMock(return_value=None)
        router.add_route("/hooks", handler, gates=[SignatureGate(), EventGate([EventKind.PUSH])])

        request = make_request(event="issues", signature="sha1=bad")
        response = await router.dispatch(request)

        # Event mismatch is decided first, so the bad signature is never seen
        assert response.status_code == 404
        assert request.body_consumed is False

        good = await router.dispatch(make_request(event="push"))
        assert good.status_code == 204
        payload, event = handler.await_args.args
        assert payload == {"a": 1}
        assert event is EventKind.PUSH

    @pytest.mark.asyncio
    async def test_signature_failure_after_event_match_is_fatal(self, router):
        fallback = AsyncMock()
        router.add_route("/hooks", AsyncMock(), gates=[EventGate([EventKind.PUSH]), SignatureGate()])
        router.add_route("/hooks", fallback, gates=[EventGate([EventKind.WILDCARD])])

        response = await router.dispatch(make_request(event="push", signature=None))

        assert response.status_code == 401
        fallback.assert_not_called()

    @pytest.mark.asyncio
    async def test_stage_ordering(self, router):
        log: list = []
        gates = [
            RecordingGate("body-1", GateStage.BODY, log),
            RecordingGate("headers", GateStage.HEADERS, log),
            RecordingGate("body-2", GateStage.BODY, log),
        ]
        handler = AsyncMock(return_value=None)
        router.add_route("/hooks", handler, gates=gates)

        await router.dispatch(make_request())

        assert log == ["headers", "body-1", "body-2"]
        handler.assert_awaited_once_with("body-1", "headers", "body-2")

    def test_evaluation_order(self):
        log: list = []
        route = Route(
            path="/",
            handler=lambda *a: None,
            gates=(
                RecordingGate(0, GateStage.BODY, log),
                RecordingGate(1, GateStage.HEADERS, log),
            ),
        )
        assert route.evaluation_order() == [1, 0]


class TestRouteSearch:
    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, router):
        router.add_route("/hooks", AsyncMock())
        response = await router.dispatch(make_request(path="/elsewhere"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, router):
        router.add_route("/hooks", AsyncMock())
        response = await router.dispatch(make_request(method="GET"))
        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_trailing_slash_ignored(self, router):
        handler = AsyncMock(return_value=None)
        router.add_route("/hooks/", handler)
        response = await router.dispatch(make_request(path="/hooks"))
        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_first_admitting_route_wins(self, router):
        first = AsyncMock(return_value={"n": 1})
        second = AsyncMock(return_value={"n": 2})
        router.add_route("/hooks", first, gates=[EventGate([EventKind.WILDCARD])])
        router.add_route("/hooks", second, gates=[EventGate([EventKind.PUSH])])

        response = await router.dispatch(make_request(event="push"))

        assert response.json_body() == {"n": 1}
        second.assert_not_called()

    @pytest.mark.asyncio
    async def test_continue_rejection_from_custom_gate(self, router):
        class Never(Gate):
            async def check(self, request, context):
                return RejectContinue(Rejection.BAD_REQUEST, "never")

        fallback = AsyncMock(return_value={"fallback": True})
        router.add_route("/hooks", AsyncMock(), gates=[Never()])
        router.add_route("/hooks", fallback)

        response = await router.dispatch(make_request())

        assert response.json_body() == {"fallback": True}


class TestHandlers:
    @pytest.mark.asyncio
    async def test_sync_handler(self, router):
        router.add_route("/hooks", lambda: {"sync": True})
        response = await router.dispatch(make_request())
        assert response.json_body() == {"sync": True}

    @pytest.mark.asyncio
    async def test_response_passthrough(self, router):
        router.add_route("/hooks", AsyncMock(return_value=Response(status_code=202, body=b"queued")))
        response = await router.dispatch(make_request())
        assert response.status_code == 202
        assert response.body == b"queued"

    @pytest.mark.asyncio
    async def test_handler_exception_propagates(self, router):
        router.add_route("/hooks", AsyncMock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            await router.dispatch(make_request())

    @pytest.mark.asyncio
    async def test_key_provider_failure_propagates(self):
        provider = AsyncMock(spec=SigningKeyProvider)
        provider.get_key.side_effect = OSError("secret store down")
        router = Router(RouteContext(provider))
        router.add_route("/hooks", AsyncMock(), gates=[SignatureGate()])

        with pytest.raises(OSError):
            await router.dispatch(make_request())


class TestRegistration:
    def test_signature_gate_requires_key_provider(self):
        router = Router(RouteContext())
        with pytest.raises(ConfigurationError, match="SigningKeyProvider"):
            router.add_route("/hooks", AsyncMock(), gates=[SignatureGate()])

    def test_event_gate_needs_no_context(self):
        router = Router()
        route = router.add_route("/hooks", AsyncMock(), gates=[EventGate([EventKind.PUSH])])
        assert router.routes == [route]

    def test_route_name_defaults_to_handler_name(self, router):
        def on_push(event):
            return None

        route = router.add_route("/hooks", on_push)
        assert route.name == "on_push"

    def test_methods_normalized(self, router):
        route = router.add_route("/hooks", AsyncMock(), methods=["post", "put"])
        assert route.methods == frozenset({"POST", "PUT"})

    def test_decorator_returns_handler(self, router):
        @router.route("/hooks")
        async def handler():
            return None

        assert callable(handler)
        assert router.routes[0].handler is handler
