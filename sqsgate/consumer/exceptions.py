"""
Exceptions raised by the SQS consumer.

Forbidden outcomes (untrusted origin, bad digest) are not exceptions on the
request path; they travel as TrustDecision values. The exceptions here are for
failures that must reach the surrounding server unmasked.
"""


class SqsGateError(Exception):
    """Base class for sqsgate errors."""


class InvalidSignature(SqsGateError):  # noqa: N818
    """The message digest does not match the message body."""


class TaskResolutionError(SqsGateError):
    """A periodic task or job name does not resolve to a registered handler."""


class JobDeserializationError(SqsGateError):
    """A verified job body cannot be turned into a job description."""
