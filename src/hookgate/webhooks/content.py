"""
Content negotiation for signed request bodies.

A ContentDecoders registry maps a media type to a function turning the
raw body into the handler's payload. SignatureGate picks the decoder by the
request's Content-Type once the signature has been verified.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator
from urllib.parse import parse_qs

from hookgate.core.exceptions import DecodeError
from hookgate.core.types import DEFAULT_CONTENT_TYPE

Decoder = Callable[[bytes], Any]

JSON = "application/json"
FORM = "application/x-www-form-urlencoded"


def media_type(content_type: str) -> str:
    """Strip parameters (e.g. charset) and normalize case: 'Application/JSON; charset=utf-8' -> 'application/json'."""
    return content_type.split(";", 1)[0].strip().lower()


def decode_json(body: bytes) -> Any:
    """Decode a JSON body. The payload keeps JSON's own types (dict, list, ...)."""
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Invalid JSON payload: {e}", content_type=JSON) from e


def decode_form(body: bytes) -> Any:
    """
    Decode a form-encoded delivery.

    GitHub webhooks configured with content type "application/x-www-form-urlencoded"
    send the JSON document in a single `payload` field.
    """
    try:
        fields = parse_qs(body.decode("utf-8"), keep_blank_values=True, strict_parsing=bool(body))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"Invalid form payload: {e}", content_type=FORM) from e

    payload = fields.get("payload")
    if not payload:
        raise DecodeError("Form payload has no 'payload' field", content_type=FORM)
    return decode_json(payload[0].encode("utf-8"))


class ContentDecoders:
    """
    Registry of body decoders keyed by media type.

    Example:
        >>> decoders = ContentDecoders.default()
        >>> decoders.register("text/plain", lambda body: body.decode("utf-8"))
        >>> decoders.decode("application/json; charset=utf-8", b'{"a": 1}')
        {'a': 1}
    """

    def __init__(
        self,
        decoders: dict[str, Decoder] | None = None,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        self._decoders: dict[str, Decoder] = {}
        self.default_content_type = default_content_type
        for content_type, decoder in (decoders or {}).items():
            self.register(content_type, decoder)

    @classmethod
    def default(cls, default_content_type: str = DEFAULT_CONTENT_TYPE) -> ContentDecoders:
        """JSON and GitHub form deliveries."""
        return cls({JSON: decode_json, FORM: decode_form}, default_content_type)

    def register(self, content_type: str, decoder: Decoder) -> ContentDecoders:
        """Add or replace the decoder for a media type."""
        self._decoders[media_type(content_type)] = decoder
        return self

    def select(self, content_type: str | None) -> Decoder | None:
        """Decoder for the request's content type (or the fallback type when absent)."""
        declared = content_type if content_type else self.default_content_type
        return self._decoders.get(media_type(declared))

    def decode(self, content_type: str | None, body: bytes) -> Any:
        """
        Decode `body` with the decoder for `content_type`.

        Raises:
            LookupError: If no decoder is registered for the content type
            DecodeError: If the decoder rejects the body
        """
        decoder = self.select(content_type)
        if decoder is None:
            raise LookupError(f"No decoder for content type {content_type!r}")
        return decoder(body)

    @property
    def content_types(self) -> list[str]:
        return list(self._decoders)

    def __contains__(self, content_type: str) -> bool:
        return media_type(content_type) in self._decoders

    def __iter__(self) -> Iterator[str]:
        return iter(self._decoders)

    def __len__(self) -> int:
        return len(self._decoders)
