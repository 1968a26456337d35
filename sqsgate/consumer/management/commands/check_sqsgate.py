"""
Verify that the SQS consumer is configured the way you think it is.

Run it on the worker after deploying, or when the daemon's messages keep
landing in the dead letter queue.

Usage:
    python manage.py check_sqsgate
    python manage.py check_sqsgate --verbose

What this command checks:
    1. Whether message processing is switched on
    2. The shared secret (presence only, it is never printed)
    3. The digest algorithm and periodic tasks route
    4. Container detection and the trusted bridge networks
    5. The task backend and what it can resolve
"""

from __future__ import annotations

import hashlib
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand

from sqsgate.consumer.environment import get_container_probe
from sqsgate.consumer.settings import ConsumerSettings
from sqsgate.consumer.tasks.backends import get_task_backend

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    """Status of a configuration check."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CheckResult:
    """Result of a single configuration check."""

    name: str
    status: CheckStatus
    message: str
    details: str | None = None
    fix_hint: str | None = None


class Command(BaseCommand):
    help = "Verify the SQS consumer configuration"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.results: list[CheckResult] = []
        self.verbose = False
        self.consumer_settings: ConsumerSettings | None = None

    def add_arguments(self, parser):
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed output for each check",
        )

    def handle(self, *args, **options):
        self.verbose = options.get("verbose", False)

        checks: list[tuple[str, Callable]] = [
            ("Configuration", self._check_configuration),
            ("Network", self._check_network),
            ("Task Backend", self._check_task_backend),
        ]

        for section_name, check_func in checks:
            self.stdout.write(self.style.MIGRATE_HEADING(f"Checking {section_name}..."))
            check_func()
            self.stdout.write("")

        errors = [r for r in self.results if r.status == CheckStatus.ERROR]
        warnings = [r for r in self.results if r.status == CheckStatus.WARNING]
        if errors:
            self.stdout.write(self.style.ERROR(f"{len(errors)} error(s) found."))
            sys.exit(1)
        if warnings:
            self.stdout.write(self.style.WARNING(f"{len(warnings)} warning(s)."))
        else:
            self.stdout.write(self.style.SUCCESS("All checks passed."))

    def _add_result(
        self,
        name: str,
        status: CheckStatus,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ):
        self.results.append(
            CheckResult(
                name=name,
                status=status,
                message=message,
                details=details,
                fix_hint=fix_hint,
            ),
        )

        if status == CheckStatus.OK:
            icon = self.style.SUCCESS("✓")
            msg = self.style.SUCCESS(message)
        elif status == CheckStatus.WARNING:
            icon = self.style.WARNING("!")
            msg = self.style.WARNING(message)
        else:
            icon = self.style.ERROR("✗")
            msg = self.style.ERROR(message)

        self.stdout.write(f"  {icon} {msg}")

        if self.verbose and details:
            for line in details.split("\n"):
                self.stdout.write(f"      {line}")

        if status in (CheckStatus.ERROR, CheckStatus.WARNING) and fix_hint:
            self.stdout.write(f"      Fix: {fix_hint}")

    # =========================================================================
    # Configuration
    # =========================================================================

    def _check_configuration(self):
        try:
            self.consumer_settings = ConsumerSettings.from_settings()
        except ImproperlyConfigured as exc:
            self._add_result(
                "Settings",
                CheckStatus.ERROR,
                str(exc),
                fix_hint="Correct the setting named above in the worker environment",
            )
            return

        consumer_settings = self.consumer_settings
        if consumer_settings.process_jobs:
            self._add_result("Processing", CheckStatus.OK, "Processing SQS messages")
        else:
            self._add_result(
                "Processing",
                CheckStatus.WARNING,
                "SQSGATE_PROCESS_JOBS is off; daemon requests pass through",
                fix_hint="Set SQSGATE_PROCESS_JOBS=true on worker environments",
            )

        if getattr(settings, "SQSGATE_SECRET_KEY", ""):
            self._add_result("Secret", CheckStatus.OK, "SQSGATE_SECRET_KEY is set")
        else:
            self._add_result(
                "Secret",
                CheckStatus.WARNING,
                "Using SECRET_KEY to verify digests",
                fix_hint=(
                    "Web and worker must share SECRET_KEY, or set "
                    "SQSGATE_SECRET_KEY on both"
                ),
            )

        if consumer_settings.digest_algorithm in hashlib.algorithms_available:
            self._add_result(
                "Digest",
                CheckStatus.OK,
                f"HMAC-{consumer_settings.digest_algorithm.upper()} digests",
            )
        else:
            self._add_result(
                "Digest",
                CheckStatus.ERROR,
                f"Unsupported digest algorithm: {consumer_settings.digest_algorithm}",
                fix_hint="Set SQSGATE_DIGEST_ALGORITHM to a hashlib algorithm name",
            )

        if consumer_settings.periodic_tasks_route:
            self._add_result(
                "Route",
                CheckStatus.OK,
                f"Periodic tasks route: {consumer_settings.periodic_tasks_route}",
            )
        else:
            self._add_result(
                "Route",
                CheckStatus.WARNING,
                "Periodic tasks route is empty; every daemon request is a job",
            )

    # =========================================================================
    # Network
    # =========================================================================

    def _check_network(self):
        if self.consumer_settings is None:
            return
        probe = get_container_probe(self.consumer_settings)
        containerized = probe.is_containerized()
        networks = ", ".join(
            str(network) for network in self.consumer_settings.trusted_bridge_networks
        )
        if containerized:
            self._add_result(
                "Container",
                CheckStatus.OK,
                "Running in a container; trusting the bridge networks",
                details=f"Probe: {probe!r}\nTrusted networks: {networks}",
            )
        else:
            self._add_result(
                "Container",
                CheckStatus.OK,
                "Not running in a container; only local peers are trusted",
                details=f"Probe: {probe!r}",
            )

    # =========================================================================
    # Task backend
    # =========================================================================

    def _check_task_backend(self):
        name = (
            self.consumer_settings.task_backend
            if self.consumer_settings
            else getattr(settings, "SQSGATE_TASK_BACKEND", "local")
        )
        try:
            backend = get_task_backend(name)
        except ImproperlyConfigured as exc:
            self._add_result("Backend", CheckStatus.ERROR, str(exc))
            return

        task_names = backend.task_names()
        total = sum(len(names) for names in task_names.values())
        details = "\n".join(
            f"{kind}: {', '.join(names) or '(none)'}" for kind, names in task_names.items()
        )
        status = CheckStatus.OK if total else CheckStatus.WARNING
        self._add_result(
            "Backend",
            status,
            f"Task backend '{backend.backend_name}' with {total} handler(s)",
            details=details,
            fix_hint="Register handlers in a periodic_tasks.py or jobs.py module",
        )
