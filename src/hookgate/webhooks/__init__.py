"""
Webhook wire format: requests, signature scheme and body decoding.
"""

from hookgate.webhooks.content import ContentDecoders, decode_form, decode_json, media_type
from hookgate.webhooks.request import WebhookRequest
from hookgate.webhooks.signature import (
    SHA1_SCHEME,
    SHA256_SCHEME,
    SHA512_SCHEME,
    SignatureScheme,
    compute_signature,
    verify_signature,
)

__all__ = [
    "ContentDecoders",
    "WebhookRequest",
    "SignatureScheme",
    "SHA1_SCHEME",
    "SHA256_SCHEME",
    "SHA512_SCHEME",
    "compute_signature",
    "verify_signature",
    "decode_json",
    "decode_form",
    "media_type",
]
