"""
Consumer configuration as an explicit value object.

Django settings are the source of truth, but the consumer components never read
``django.conf.settings`` themselves: they receive a ``ConsumerSettings`` built
by ``ConsumerSettings.from_settings()`` (or by a test). The one value read on
every request is the ``SQSGATE_PROCESS_JOBS`` switch, via ``is_processing_enabled``.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from dataclasses import field
from ipaddress import IPv4Network
from ipaddress import IPv6Network

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from sqsgate.consumer.constants import DEFAULT_DIGEST_ALGORITHM
from sqsgate.consumer.constants import DEFAULT_PERIODIC_TASKS_ROUTE
from sqsgate.consumer.constants import DEFAULT_TRUSTED_BRIDGE_NETWORKS


def parse_containerized(value) -> bool | None:
    """Accept only True, False or None (autodetect)."""
    if value is None or isinstance(value, bool):
        return value
    msg = (
        "SQSGATE_CONTAINERIZED must be True, False or None (autodetect), "
        f"got {value!r}"
    )
    raise ImproperlyConfigured(msg)


def parse_networks(values) -> tuple[IPv4Network | IPv6Network, ...]:
    """Parse CIDR strings, raising ImproperlyConfigured for bad entries."""
    networks = []
    for value in values:
        try:
            networks.append(ipaddress.ip_network(str(value).strip(), strict=False))
        except ValueError as exc:
            msg = f"Invalid network in SQSGATE_TRUSTED_BRIDGE_NETWORKS: {value!r}"
            raise ImproperlyConfigured(msg) from exc
    return tuple(networks)


@dataclass(frozen=True)
class ConsumerSettings:
    """Everything the consumer needs to know about its deployment."""

    process_jobs: bool
    secret_key: bytes = field(repr=False)
    periodic_tasks_route: str = DEFAULT_PERIODIC_TASKS_ROUTE
    digest_algorithm: str = DEFAULT_DIGEST_ALGORITHM
    trusted_bridge_networks: tuple[IPv4Network | IPv6Network, ...] = field(
        default_factory=lambda: parse_networks(DEFAULT_TRUSTED_BRIDGE_NETWORKS),
    )
    containerized: bool | None = None
    task_backend: str = "local"

    @classmethod
    def from_settings(cls) -> ConsumerSettings:
        """
        Build the consumer settings from the SQSGATE_* Django settings.

        Raises:
            ImproperlyConfigured: If neither SQSGATE_SECRET_KEY nor SECRET_KEY
                is set, a trusted network is not valid CIDR, or
                SQSGATE_CONTAINERIZED is not a boolean or None.
        """
        secret = getattr(settings, "SQSGATE_SECRET_KEY", "") or getattr(
            settings,
            "SECRET_KEY",
            "",
        )
        if not secret:
            msg = (
                "SQSGATE_SECRET_KEY (or SECRET_KEY) must be set: it is the "
                "shared secret used to verify job message digests."
            )
            raise ImproperlyConfigured(msg)
        if isinstance(secret, str):
            secret = secret.encode()

        return cls(
            process_jobs=getattr(settings, "SQSGATE_PROCESS_JOBS", False) is True,
            secret_key=secret,
            periodic_tasks_route=getattr(
                settings,
                "SQSGATE_PERIODIC_TASKS_ROUTE",
                DEFAULT_PERIODIC_TASKS_ROUTE,
            ),
            digest_algorithm=getattr(
                settings,
                "SQSGATE_DIGEST_ALGORITHM",
                DEFAULT_DIGEST_ALGORITHM,
            ),
            trusted_bridge_networks=parse_networks(
                getattr(
                    settings,
                    "SQSGATE_TRUSTED_BRIDGE_NETWORKS",
                    DEFAULT_TRUSTED_BRIDGE_NETWORKS,
                ),
            ),
            containerized=parse_containerized(
                getattr(settings, "SQSGATE_CONTAINERIZED", None),
            ),
            task_backend=getattr(settings, "SQSGATE_TASK_BACKEND", "local"),
        )


def is_processing_enabled() -> bool:
    """Read the master switch straight from Django settings."""
    return getattr(settings, "SQSGATE_PROCESS_JOBS", False) is True
