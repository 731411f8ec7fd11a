"""
SignatureGate: admit a body only if its HMAC matches the signature header.

Every failure is fatal. Once a route asks for a signed body, a request that
cannot prove its origin must not be offered to any other route.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookgate.core.exceptions import DecodeError
from hookgate.core.logging import get_logger
from hookgate.gates.base import Admit, Gate, GateStage, Outcome, Rejection, RejectFatal
from hookgate.keys.base import SigningKeyProvider
from hookgate.webhooks.content import ContentDecoders
from hookgate.webhooks.signature import SHA1_SCHEME, SignatureScheme

if TYPE_CHECKING:
    from hookgate.gates.context import RouteContext
    from hookgate.webhooks.request import WebhookRequest

logger = get_logger("gates.signature")


class SignatureGate(Gate):
    """
    Verify `HMAC(key, raw body)` against the signature header, then decode the body.

    The key comes from the SigningKeyProvider registered in the route
    context and is fetched on every request. The decoded payload is
    forwarded to the handler.

    Outcomes:
        - header missing or unparsable -> RejectFatal(UNAUTHORIZED)
        - digest mismatch -> RejectFatal(UNAUTHORIZED)
        - no decoder for the content type -> RejectFatal(UNSUPPORTED_MEDIA)
        - decoder error (DecodeError or any ValueError) -> RejectFatal(BAD_REQUEST)
          with the decoder's message
    """

    stage = GateStage.BODY
    requires = (SigningKeyProvider,)

    def __init__(
        self,
        scheme: SignatureScheme = SHA1_SCHEME,
        decoders: ContentDecoders | None = None,
    ) -> None:
        self.scheme = scheme
        self.decoders = decoders if decoders is not None else ContentDecoders.default()

    async def check(self, request: WebhookRequest, context: RouteContext) -> Outcome:
        header_value = request.header(self.scheme.header)
        if header_value is None:
            return self._reject(Rejection.UNAUTHORIZED, f"Missing {self.scheme.header} header")

        digest = self.scheme.parse(header_value)
        if digest is None:
            return self._reject(Rejection.UNAUTHORIZED, f"Malformed {self.scheme.header} header")

        body = await request.body()
        key = await context.get(SigningKeyProvider).get_key()

        if not self.scheme.verify(key, body, digest):
            return self._reject(Rejection.UNAUTHORIZED, "Signature mismatch")

        decoder = self.decoders.select(request.content_type)
        if decoder is None:
            declared = request.content_type or self.decoders.default_content_type
            return self._reject(
                Rejection.UNSUPPORTED_MEDIA, f"Unsupported content type: {declared}"
            )

        try:
            payload = decoder(body)
        except (DecodeError, ValueError) as e:
            # Caller-supplied decoders raise ValueError subclasses (UnicodeDecodeError, pydantic)
            return self._reject(Rejection.BAD_REQUEST, str(e))

        logger.debug(f"Signature verified ({self.scheme.algorithm}, {len(body)} bytes)")
        return Admit(payload)

    def _reject(self, rejection: Rejection, reason: str) -> RejectFatal:
        logger.warning(f"Rejected signed request: {reason}")
        return RejectFatal(rejection, reason)
