"""
HMAC signature scheme for webhook bodies.

The sender signs the raw body with a shared secret and sends
`<algorithm>=<lowercase hex digest>` in a header, e.g.

    X-Hub-Signature: sha1=0b5a0d6b...
    X-Hub-Signature-256: sha256=6e1c5a3f...

Verification runs over the literal wire bytes and compares digests in
constant time.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Callable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from hookgate.core.types import SIGNATURE_256_HEADER, SIGNATURE_HEADER

_HEX_DIGITS = frozenset(string.hexdigits.lower())


@dataclass(frozen=True)
class SignatureScheme:
    """
    How a delivery is signed.

    Attributes:
        header: Header carrying the signature
        algorithm: Tag before the '=' in the header value
        hash_factory: Builds the cryptography hash used for the HMAC
    """

    header: str
    algorithm: str
    hash_factory: Callable[[], hashes.HashAlgorithm]

    @property
    def digest_size(self) -> int:
        return self.hash_factory().digest_size

    @classmethod
    def for_algorithm(cls, algorithm: str, header: str | None = None) -> SignatureScheme:
        """
        Scheme for a named algorithm ("sha1", "sha256", "sha512").

        Raises:
            ValueError: If the algorithm is not supported
        """
        base = _SCHEMES.get(algorithm.lower())
        if base is None:
            raise ValueError(
                f"Unsupported signature algorithm: {algorithm}. Supported: {sorted(_SCHEMES)}"
            )
        if header:
            return cls(header=header, algorithm=base.algorithm, hash_factory=base.hash_factory)
        return base

    def compute(self, key: bytes, body: bytes) -> bytes:
        """Raw HMAC digest of `body`."""
        mac = hmac.HMAC(key, self.hash_factory())
        mac.update(body)
        return mac.finalize()

    def sign(self, key: bytes, body: bytes) -> str:
        """Header value for `body`: '<algorithm>=<lowercase hex>'."""
        return f"{self.algorithm}={self.compute(key, body).hex()}"

    def parse(self, header_value: str) -> bytes | None:
        """
        Extract the digest from a header value.

        Everything up to the first '=' is the algorithm tag, which must match
        this scheme. The rest must be lowercase hex of the right length.
        Returns None when the value is unparsable.
        """
        algorithm, sep, hex_digest = header_value.strip().partition("=")
        if not sep or algorithm != self.algorithm:
            return None
        if len(hex_digest) != 2 * self.digest_size or not _HEX_DIGITS.issuperset(hex_digest):
            return None
        return bytes.fromhex(hex_digest)

    def verify(self, key: bytes, body: bytes, digest: bytes) -> bool:
        """Constant-time check that `digest` is HMAC(key, body)."""
        mac = hmac.HMAC(key, self.hash_factory())
        mac.update(body)
        try:
            mac.verify(digest)
        except InvalidSignature:
            return False
        return True


SHA1_SCHEME = SignatureScheme(header=SIGNATURE_HEADER, algorithm="sha1", hash_factory=hashes.SHA1)
SHA256_SCHEME = SignatureScheme(
    header=SIGNATURE_256_HEADER, algorithm="sha256", hash_factory=hashes.SHA256
)
SHA512_SCHEME = SignatureScheme(
    header="X-Hub-Signature-512", algorithm="sha512", hash_factory=hashes.SHA512
)

_SCHEMES: dict[str, SignatureScheme] = {
    scheme.algorithm: scheme for scheme in (SHA1_SCHEME, SHA256_SCHEME, SHA512_SCHEME)
}


def compute_signature(secret: str | bytes, body: bytes, scheme: SignatureScheme = SHA1_SCHEME) -> str:
    """
    Header value a sender would attach to `body`.

    Handy for tests and for replaying deliveries locally.
    """
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    return scheme.sign(key, body)


def verify_signature(
    secret: str | bytes,
    body: bytes,
    header_value: str | None,
    scheme: SignatureScheme = SHA1_SCHEME,
) -> bool:
    """True when `header_value` is a valid signature of `body` under `secret`."""
    if not header_value:
        return False
    digest = scheme.parse(header_value)
    if digest is None:
        return False
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    return scheme.verify(key, body, digest)
