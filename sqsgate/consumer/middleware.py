"""
Middleware consuming messages delivered by the Elastic Beanstalk SQS daemon.

In a worker environment the daemon polls the queue and POSTs each message to
this application with a ``User-Agent`` starting with ``aws-sqsd``. Two kinds of
message arrive:

(1) periodic tasks from Elastic Beanstalk's cron.yaml feature. The request path
    starts with SQSGATE_PERIODIC_TASKS_ROUTE and the task name is in the
    ``X-Aws-Sqsd-Taskname`` header.

(2) jobs enqueued by the web environment. The body is the serialized job and
    the ``X-Aws-Sqsd-Attr-Message-Digest`` header carries a keyed digest of it,
    so the web and worker environments must share the same secret
    (SQSGATE_SECRET_KEY, or SECRET_KEY when that is empty).

Daemon requests are only believed when they come from this host, or, inside a
container, from the container host on a default bridge network. Anything that
fails a check gets the same 403; anything that is not daemon traffic continues
down the middleware chain untouched.

Place this middleware before CsrfViewMiddleware::

    MIDDLEWARE = [
        "django.middleware.security.SecurityMiddleware",
        "sqsgate.consumer.middleware.SqsMessageConsumerMiddleware",
        ...
    ]
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING

from django.http import HttpResponse

from sqsgate.consumer.classifier import OriginClassifier
from sqsgate.consumer.constants import FORBIDDEN_BODY
from sqsgate.consumer.constants import OK_BODY
from sqsgate.consumer.constants import RESPONSE_CONTENT_TYPE
from sqsgate.consumer.constants import TrustDecision
from sqsgate.consumer.environment import get_container_probe
from sqsgate.consumer.gate import RequestGate
from sqsgate.consumer.jobs import JobDescription
from sqsgate.consumer.network import TrustedNetworkPolicy
from sqsgate.consumer.router import RequestRouter
from sqsgate.consumer.settings import ConsumerSettings
from sqsgate.consumer.settings import is_processing_enabled
from sqsgate.consumer.signing import MessageVerifier
from sqsgate.consumer.signing import read_raw_body
from sqsgate.consumer.tasks.backends import get_task_backend

if TYPE_CHECKING:
    from collections.abc import Callable

    from django.http import HttpRequest

    from sqsgate.consumer.environment import ContainerProbe
    from sqsgate.consumer.tasks.backends import TaskBackend

logger = logging.getLogger(__name__)


def ok_response() -> HttpResponse:
    return HttpResponse(OK_BODY, content_type=RESPONSE_CONTENT_TYPE, status=HTTPStatus.OK)


def forbidden_response() -> HttpResponse:
    return HttpResponse(
        FORBIDDEN_BODY,
        content_type=RESPONSE_CONTENT_TYPE,
        status=HTTPStatus.FORBIDDEN,
    )


def build_gate(
    consumer_settings: ConsumerSettings,
    probe: ContainerProbe | None = None,
) -> RequestGate:
    """Assemble classifier, router and verifier for one deployment."""
    policy = TrustedNetworkPolicy(
        probe=probe or get_container_probe(consumer_settings),
        bridge_networks=consumer_settings.trusted_bridge_networks,
    )
    return RequestGate(
        classifier=OriginClassifier(policy),
        router=RequestRouter(consumer_settings.periodic_tasks_route),
        verifier=MessageVerifier(
            consumer_settings.secret_key,
            algorithm=consumer_settings.digest_algorithm,
        ),
    )


class SqsMessageConsumerMiddleware:
    """
    Intercept SQS daemon requests and run the periodic task or job they carry.

    Everything except the master switch is fixed at construction time. Tests
    and non-Django callers can inject the settings, the enable check, the
    container probe and the task backend.
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
        *,
        consumer_settings: ConsumerSettings | None = None,
        is_enabled: Callable[[], bool] | None = None,
        probe: ContainerProbe | None = None,
        backend: TaskBackend | None = None,
    ):
        self.get_response = get_response
        self.consumer_settings = consumer_settings or ConsumerSettings.from_settings()
        self.is_enabled = is_enabled or is_processing_enabled
        self.gate = build_gate(self.consumer_settings, probe=probe)
        self.backend = backend or get_task_backend(self.consumer_settings.task_backend)

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if not self.is_enabled():
            return self.get_response(request)

        decision = self.gate.evaluate(request).decision

        if decision is TrustDecision.NOT_DAEMON_TRAFFIC:
            return self.get_response(request)
        if decision.is_forbidden:
            return forbidden_response()
        if decision is TrustDecision.PERIODIC_TASK:
            self.execute_periodic_task(request)
        else:
            self.execute_job(request)
        return ok_response()

    def execute_periodic_task(self, request: HttpRequest) -> None:
        name = self.gate.router.task_name(request)
        self.backend.run_periodic_task(name)

    def execute_job(self, request: HttpRequest) -> None:
        job = JobDescription.from_body(read_raw_body(request))
        self.backend.run_job(job)
