"""
Print the message digest a producer must send with a job body.

The digest goes into the ``message-digest`` SQS message attribute, which the
daemon forwards as ``X-Aws-Sqsd-Attr-Message-Digest``. Useful for wiring up a
producer in another codebase and for replaying a message by hand.

Usage:
    python manage.py sign_job_payload payload.json
    echo '{"job_class": "SendReceipt", "arguments": [42]}' | python manage.py sign_job_payload
    python manage.py sign_job_payload --job SendReceipt --arg 42
"""

import json
import sys
from pathlib import Path

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from sqsgate.consumer.exceptions import JobDeserializationError
from sqsgate.consumer.jobs import JobDescription
from sqsgate.consumer.jobs import serialize_job
from sqsgate.consumer.settings import ConsumerSettings
from sqsgate.consumer.signing import MessageVerifier


class Command(BaseCommand):
    help = "Compute the SQS message digest for a job payload."

    def add_arguments(self, parser):
        parser.add_argument(
            "path",
            nargs="?",
            help="File holding the exact message body (reads stdin when omitted)",
        )
        parser.add_argument(
            "--job",
            help="Build the body for this job name instead of reading one",
        )
        parser.add_argument(
            "--arg",
            action="append",
            default=[],
            dest="job_args",
            help="Positional job argument, parsed as JSON when possible (repeatable)",
        )
        parser.add_argument(
            "--show-body",
            action="store_true",
            help="Also print the body that was signed",
        )

    def handle(self, *args, **options):
        if options["job"]:
            body = serialize_job(
                options["job"],
                *[self._parse_arg(value) for value in options["job_args"]],
            )
        elif options["path"]:
            path = Path(options["path"])
            if not path.exists():
                raise CommandError(f"File not found: {path}")
            body = path.read_bytes()
        else:
            body = sys.stdin.buffer.read()

        if not body.strip():
            raise CommandError("Refusing to sign an empty body.")

        try:
            JobDescription.from_body(body)
        except JobDeserializationError as exc:
            raise CommandError(f"Not a job payload the consumer would accept: {exc}") from exc

        consumer_settings = ConsumerSettings.from_settings()
        verifier = MessageVerifier(
            consumer_settings.secret_key,
            algorithm=consumer_settings.digest_algorithm,
        )

        if options["show_body"]:
            self.stdout.write(body.decode())
        self.stdout.write(verifier.generate_digest(body))

    @staticmethod
    def _parse_arg(value: str):
        try:
            return json.loads(value)
        except ValueError:
            return value
