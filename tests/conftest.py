import json

import pytest

from hookgate.gates.context import RouteContext
from hookgate.keys.base import StaticKeyProvider
from hookgate.routing.router import Router
from hookgate.webhooks.request import WebhookRequest
from hookgate.webhooks.signature import SHA1_SCHEME, SignatureScheme

SECRET = "s3cr3t"


def sign(body: bytes, secret: str | bytes = SECRET, scheme: SignatureScheme = SHA1_SCHEME) -> str:
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    return scheme.sign(key, body)


def make_request(
    body: bytes = b'{"a":1}',
    event: str | None = "push",
    signature: str | None = "auto",
    content_type: str | None = "application/json",
    path: str = "/hooks",
    method: str = "POST",
    scheme: SignatureScheme = SHA1_SCHEME,
    extra_headers: dict[str, str] | None = None,
) -> WebhookRequest:
    """Build a request the way GitHub would send it; pass None to drop a header."""
    headers: dict[str, str] = {}
    if event is not None:
        headers["X-GitHub-Event"] = event
    if signature == "auto":
        signature = sign(body, scheme=scheme)
    if signature is not None:
        headers[scheme.header] = signature
    if content_type is not None:
        headers["Content-Type"] = content_type
    headers.update(extra_headers or {})
    return WebhookRequest(method=method, path=path, headers=headers, body=body)


@pytest.fixture
def key_provider() -> StaticKeyProvider:
    return StaticKeyProvider(SECRET)


@pytest.fixture
def context(key_provider) -> RouteContext:
    return RouteContext(key_provider)


@pytest.fixture
def router(context) -> Router:
    return Router(context)


@pytest.fixture
def push_payload() -> bytes:
    return json.dumps(
        {
            "ref": "refs/heads/main",
            "repository": {"full_name": "octo/hello"},
            "pusher": {"name": "octocat"},
        },
        separators=(",", ":"),
    ).encode("utf-8")
