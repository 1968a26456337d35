"""
Origin classification for inbound requests.

Step one looks at the User-Agent only: is this request claiming to be the SQS
daemon? Step two decides whether the claim is believable, using the trusted
network policy. The User-Agent is a routing hint, never proof of trust.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqsgate.consumer.constants import SQSD_USER_AGENT_PREFIX
from sqsgate.consumer.constants import USER_AGENT_HEADER
from sqsgate.consumer.constants import OriginVerdict
from sqsgate.consumer.network import get_client_ip
from sqsgate.consumer.network import get_remote_addr

if TYPE_CHECKING:
    from django.http import HttpRequest

    from sqsgate.consumer.network import TrustedNetworkPolicy

logger = logging.getLogger(__name__)

_PREFIX_LENGTH = len(SQSD_USER_AGENT_PREFIX)


def is_sqsd_user_agent(user_agent: str | None) -> bool:
    return bool(user_agent) and user_agent[:_PREFIX_LENGTH] == SQSD_USER_AGENT_PREFIX


class OriginClassifier:
    """Sorts requests into ordinary traffic, rejected claims and accepted claims."""

    def __init__(self, policy: TrustedNetworkPolicy):
        self.policy = policy

    def classify(self, request: HttpRequest) -> OriginVerdict:
        if not is_sqsd_user_agent(request.headers.get(USER_AGENT_HEADER)):
            return OriginVerdict.NOT_DAEMON_TRAFFIC

        if self.policy.is_trusted(request):
            return OriginVerdict.ACCEPTED

        logger.warning(
            "Rejected SQS daemon claim from untrusted peer "
            "(remote_addr=%s, client_ip=%s, path=%s)",
            get_remote_addr(request),
            get_client_ip(request),
            request.path,
        )
        return OriginVerdict.REJECTED
