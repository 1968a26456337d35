"""
Message digests for queued jobs.

The producing web environment signs every job body with
``HMAC(secret, body)`` and sends the hex digest as the
``message-digest`` SQS message attribute; the daemon forwards it as the
``X-Aws-Sqsd-Attr-Message-Digest`` header. The worker recomputes the digest
over the exact raw body and compares the two. Both environments must share
the same secret.

The digest is keyed on purpose: a bare hash of the body could be recomputed
by anyone who can see or craft a message.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from django.utils.crypto import constant_time_compare

from sqsgate.consumer.constants import DEFAULT_DIGEST_ALGORITHM
from sqsgate.consumer.exceptions import InvalidSignature

if TYPE_CHECKING:
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


class FailureReason(str, Enum):
    MISSING_MESSAGE = "missing_message"
    MISSING_DIGEST = "missing_digest"
    DIGEST_MISMATCH = "digest_mismatch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    reason: FailureReason | None = None

    def __bool__(self) -> bool:
        return self.ok


VERIFIED = VerificationResult(ok=True)


class MessageVerifier:
    """
    Generates and checks keyed digests of raw message bodies.

    Instances hold nothing but the secret and the hash constructor, so one
    verifier can be shared by every request thread.
    """

    def __init__(self, secret: bytes | str, algorithm: str = DEFAULT_DIGEST_ALGORITHM):
        if isinstance(secret, str):
            secret = secret.encode()
        if not secret:
            msg = "MessageVerifier requires a non-empty secret"
            raise ValueError(msg)
        if algorithm not in hashlib.algorithms_available:
            msg = f"Unsupported digest algorithm: {algorithm}"
            raise ValueError(msg)
        self._secret = secret
        self.algorithm = algorithm

    def __repr__(self) -> str:
        return f"MessageVerifier(algorithm={self.algorithm!r})"

    def generate_digest(self, message: bytes | str) -> str:
        if isinstance(message, str):
            message = message.encode()
        return hmac.new(self._secret, message, self.algorithm).hexdigest()

    def verify(self, message: bytes | str | None, digest: str | None) -> VerificationResult:
        """Check ``digest`` against ``message`` without raising."""
        if not message:
            return VerificationResult(ok=False, reason=FailureReason.MISSING_MESSAGE)
        if digest is None or not digest.strip():
            return VerificationResult(ok=False, reason=FailureReason.MISSING_DIGEST)
        if not constant_time_compare(self.generate_digest(message), digest):
            return VerificationResult(ok=False, reason=FailureReason.DIGEST_MISMATCH)
        return VERIFIED

    def verify_or_raise(self, message: bytes | str | None, digest: str | None) -> None:
        """
        Check ``digest`` against ``message``.

        Raises:
            InvalidSignature: If the digest is missing or does not match.
        """
        result = self.verify(message, digest)
        if not result:
            raise InvalidSignature(str(result.reason))


def read_raw_body(request: HttpRequest) -> bytes:
    """
    Read the request body once and leave it readable from the start.

    ``HttpRequest.body`` consumes the WSGI input stream and replaces it with an
    in-memory copy, so later ``request.read()`` calls (and ``request.body``
    itself) see the full body again. If the stream was already partly consumed
    this raises ``RawPostDataException``.
    """
    body = request.body
    stream = getattr(request, "_stream", None)
    if stream is not None and hasattr(stream, "seek"):
        stream.seek(0)
    return body
