"""Request builders shared by the consumer tests."""

from __future__ import annotations

import hashlib
import hmac

from django.test import RequestFactory

TEST_SECRET = b"sqsgate-unit-test-secret"
SQSD_USER_AGENT = "aws-sqsd/1.0"


def sign(body: bytes, secret: bytes = TEST_SECRET) -> str:
    """Digest exactly the way a producer computes it."""
    return hmac.new(secret, body, hashlib.sha1).hexdigest()


def daemon_request(
    rf: RequestFactory,
    path: str,
    *,
    body: bytes = b"",
    remote_addr: str = "127.0.0.1",
    user_agent: str | None = SQSD_USER_AGENT,
    task_name: str | None = None,
    digest: str | None = None,
    forwarded_for: str | None = None,
):
    """Build a POST shaped like the ones the SQS daemon sends."""
    extra = {"REMOTE_ADDR": remote_addr}
    if user_agent is not None:
        extra["HTTP_USER_AGENT"] = user_agent
    if task_name is not None:
        extra["HTTP_X_AWS_SQSD_TASKNAME"] = task_name
    if digest is not None:
        extra["HTTP_X_AWS_SQSD_ATTR_MESSAGE_DIGEST"] = digest
    if forwarded_for is not None:
        extra["HTTP_X_FORWARDED_FOR"] = forwarded_for
    return rf.post(path, data=body, content_type="application/json", **extra)
