"""
The trust decision for one request.

``RequestGate.evaluate`` runs the origin classifier, the router and, for jobs,
the digest check, and returns a ``GateDecision``. It never executes work and
never raises for a forbidden request: rejections are values, so the caller can
answer every forbidden case with the same response.

    NOT_DAEMON_TRAFFIC  no daemon claim
    UNTRUSTED_ORIGIN    daemon claim from an untrusted peer
    PERIODIC_TASK       trusted, path under the periodic tasks route
    SIGNED_JOB          trusted, job path, digest matches the raw body
    INVALID_SIGNATURE   trusted, job path, digest missing or wrong
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqsgate.consumer.constants import MESSAGE_DIGEST_HEADER
from sqsgate.consumer.constants import ORIGIN_HEADER
from sqsgate.consumer.constants import OriginVerdict
from sqsgate.consumer.constants import Route
from sqsgate.consumer.constants import TrustDecision
from sqsgate.consumer.signing import read_raw_body

if TYPE_CHECKING:
    from django.http import HttpRequest

    from sqsgate.consumer.classifier import OriginClassifier
    from sqsgate.consumer.router import RequestRouter
    from sqsgate.consumer.signing import FailureReason
    from sqsgate.consumer.signing import MessageVerifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    decision: TrustDecision
    route: Route | None = None
    failure_reason: FailureReason | None = None


NOT_DAEMON_TRAFFIC = GateDecision(TrustDecision.NOT_DAEMON_TRAFFIC)
UNTRUSTED_ORIGIN = GateDecision(TrustDecision.UNTRUSTED_ORIGIN)


class RequestGate:
    def __init__(
        self,
        classifier: OriginClassifier,
        router: RequestRouter,
        verifier: MessageVerifier,
    ):
        self.classifier = classifier
        self.router = router
        self.verifier = verifier

    def evaluate(self, request: HttpRequest) -> GateDecision:
        verdict = self.classifier.classify(request)
        if verdict is OriginVerdict.NOT_DAEMON_TRAFFIC:
            return NOT_DAEMON_TRAFFIC
        if verdict is OriginVerdict.REJECTED:
            return UNTRUSTED_ORIGIN

        route = self.router.route(request)
        if route is Route.PERIODIC_TASK:
            return GateDecision(TrustDecision.PERIODIC_TASK, route=route)

        body = read_raw_body(request)
        result = self.verifier.verify(body, request.headers.get(MESSAGE_DIGEST_HEADER))
        if not result:
            logger.warning(
                "Rejected SQS job message with invalid digest "
                "(reason=%s, origin=%s, path=%s)",
                result.reason,
                request.headers.get(ORIGIN_HEADER),
                request.path,
            )
            return GateDecision(
                TrustDecision.INVALID_SIGNATURE,
                route=route,
                failure_reason=result.reason,
            )
        return GateDecision(TrustDecision.SIGNED_JOB, route=route)
