"""
Job descriptions carried in SQS message bodies.

A job body is a JSON object naming the job and its arguments. Payloads
serialized by ActiveJob-style producers use ``job_class``; the short form
``{"job": "Name"}`` is accepted too::

    {
        "job_class": "SendReceipt",
        "job_id": "4b0f1c9e-...",
        "queue_name": "default",
        "arguments": [42],
        "keyword_arguments": {"resend": true}
    }
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from sqsgate.consumer.exceptions import JobDeserializationError

JOB_NAME_KEYS = ("job_class", "job")


@dataclass(frozen=True)
class JobDescription:
    """A deserialized job, ready to hand to a task backend."""

    job_class: str
    arguments: list[Any] = field(default_factory=list)
    keyword_arguments: dict[str, Any] = field(default_factory=dict)
    job_id: str | None = None
    queue_name: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> JobDescription:
        if not isinstance(payload, dict):
            msg = f"Job payload must be a JSON object, got {type(payload).__name__}"
            raise JobDeserializationError(msg)

        job_class = next(
            (payload[key] for key in JOB_NAME_KEYS if payload.get(key)),
            None,
        )
        if not isinstance(job_class, str):
            msg = "Job payload does not name a job (expected 'job_class' or 'job')"
            raise JobDeserializationError(msg)

        arguments = payload.get("arguments") or []
        keyword_arguments = payload.get("keyword_arguments") or {}
        if not isinstance(arguments, list):
            msg = "Job 'arguments' must be a list"
            raise JobDeserializationError(msg)
        if not isinstance(keyword_arguments, dict):
            msg = "Job 'keyword_arguments' must be an object"
            raise JobDeserializationError(msg)

        return cls(
            job_class=job_class,
            arguments=arguments,
            keyword_arguments=keyword_arguments,
            job_id=payload.get("job_id"),
            queue_name=payload.get("queue_name"),
            payload=payload,
        )

    @classmethod
    def from_body(cls, body: bytes | str) -> JobDescription:
        """
        Decode a raw message body.

        Raises:
            JobDeserializationError: If the body is not a JSON object naming a job.
        """
        try:
            payload = json.loads(body)
        except (TypeError, ValueError) as exc:
            msg = f"Job body is not valid JSON: {exc}"
            raise JobDeserializationError(msg) from exc
        return cls.from_payload(payload)


def serialize_job(
    job_class: str,
    *args: Any,
    queue_name: str = "default",
    job_id: str | None = None,
    **kwargs: Any,
) -> bytes:
    """Build a message body the consumer accepts. Used by producers and tests."""
    return json.dumps(
        {
            "job_class": job_class,
            "job_id": job_id or str(uuid.uuid4()),
            "queue_name": queue_name,
            "arguments": list(args),
            "keyword_arguments": kwargs,
        },
        separators=(",", ":"),
    ).encode()
