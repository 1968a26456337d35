"""
Trusted network policy.

The daemon's User-Agent is trivially spoofable, so a daemon claim is only
believed when the peer is either this host or, inside a container, the
container host on one of the default bridge networks.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import TYPE_CHECKING

from sqsgate.consumer.constants import DEFAULT_TRUSTED_BRIDGE_NETWORKS
from sqsgate.consumer.settings import parse_networks

if TYPE_CHECKING:
    from collections.abc import Iterable
    from ipaddress import IPv4Address
    from ipaddress import IPv4Network
    from ipaddress import IPv6Address
    from ipaddress import IPv6Network

    from django.http import HttpRequest

    from sqsgate.consumer.environment import ContainerProbe

    IPAddress = IPv4Address | IPv6Address

logger = logging.getLogger(__name__)

# Addresses a reverse proxy in front of us may legitimately have. They are
# skipped when looking for the client in X-Forwarded-For.
TRUSTED_PROXY_NETWORKS = parse_networks(
    ("127.0.0.0/8", "::1/128", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "fc00::/7"),
)


def parse_ip(value: str | None) -> IPAddress | None:
    """Parse an address, tolerating surrounding whitespace and zone ids."""
    if not value:
        return None
    value = value.strip().split("%", 1)[0]
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return None
    # Dual-stack sockets report IPv4 peers as ::ffff:a.b.c.d
    if address.version == 6 and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def _in_networks(address: IPAddress | None, networks: Iterable) -> bool:
    if address is None:
        return False
    return any(
        address.version == network.version and address in network
        for network in networks
    )


def get_remote_addr(request: HttpRequest) -> IPAddress | None:
    """The direct peer of this connection."""
    return parse_ip(request.META.get("REMOTE_ADDR"))


def get_client_ip(request: HttpRequest) -> IPAddress | None:
    """
    The client address as reported by proxies.

    Walks X-Forwarded-For from the nearest hop outwards and returns the first
    address that is not a trusted proxy. When every hop is a trusted proxy the
    furthest one is used, and without the header the direct peer is returned.
    """
    remote_addr = get_remote_addr(request)
    forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR", "")
    forwarded = [
        address
        for address in (parse_ip(part) for part in forwarded_for.split(","))
        if address is not None
    ]
    forwarded.reverse()

    candidates = [*forwarded, remote_addr]
    for address in candidates:
        if address is not None and not _in_networks(address, TRUSTED_PROXY_NETWORKS):
            return address
    if forwarded:
        return forwarded[-1]
    return remote_addr


def is_loopback(address: IPAddress | None) -> bool:
    return address is not None and address.is_loopback


class TrustedNetworkPolicy:
    """Decides whether a peer may be believed when it claims to be the daemon."""

    def __init__(
        self,
        probe: ContainerProbe,
        bridge_networks: Iterable[IPv4Network | IPv6Network] | None = None,
    ):
        self.probe = probe
        if bridge_networks is None:
            bridge_networks = parse_networks(DEFAULT_TRUSTED_BRIDGE_NETWORKS)
        self.bridge_networks = tuple(bridge_networks)

    def is_local(self, request: HttpRequest) -> bool:
        """Both the direct peer and the reported client are this host."""
        return is_loopback(get_remote_addr(request)) and is_loopback(
            get_client_ip(request),
        )

    def is_from_container_host(self, request: HttpRequest) -> bool:
        if not self.probe.is_containerized():
            return False
        return _in_networks(
            get_client_ip(request),
            self.bridge_networks,
        ) or _in_networks(get_remote_addr(request), self.bridge_networks)

    def is_trusted(self, request: HttpRequest) -> bool:
        return self.is_local(request) or self.is_from_container_host(request)
