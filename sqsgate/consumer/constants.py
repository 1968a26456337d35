from enum import Enum

# Elastic Beanstalk's SQS daemon identifies itself as "aws-sqsd/<version>".
SQSD_USER_AGENT_PREFIX = "aws-sqsd"

USER_AGENT_HEADER = "User-Agent"
TASK_NAME_HEADER = "X-Aws-Sqsd-Taskname"
MESSAGE_DIGEST_HEADER = "X-Aws-Sqsd-Attr-Message-Digest"
ORIGIN_HEADER = "X-Aws-Sqsd-Attr-Origin"

OK_BODY = "OK"
FORBIDDEN_BODY = "Request forbidden!"
RESPONSE_CONTENT_TYPE = "text/plain"

# 172.17.0.x is the default Docker bridge, 172.18.0.x the default bridge
# network of Docker Compose.
DEFAULT_TRUSTED_BRIDGE_NETWORKS = ("172.17.0.0/24", "172.18.0.0/24")

DEFAULT_PERIODIC_TASKS_ROUTE = "/periodic_tasks"
DEFAULT_DIGEST_ALGORITHM = "sha1"


class OriginVerdict(str, Enum):
    """Outcome of checking who a request claims to come from."""

    NOT_DAEMON_TRAFFIC = "not_daemon_traffic"
    REJECTED = "rejected"
    ACCEPTED = "accepted"

    def __str__(self) -> str:
        return self.value


class Route(str, Enum):
    """Kind of work carried by an accepted daemon request."""

    PERIODIC_TASK = "periodic_task"
    JOB = "job"

    def __str__(self) -> str:
        return self.value


class TrustDecision(str, Enum):
    """
    Final decision for one inbound request.

    Values:
        NOT_DAEMON_TRAFFIC: Not from the daemon (or processing is disabled).
            Forwarded to the normal application.

        UNTRUSTED_ORIGIN: Claims to be the daemon but the peer address is
            neither local nor a trusted container bridge. Forbidden.

        PERIODIC_TASK: Trusted, path under the periodic tasks route. The task
            named in the task-name header runs.

        SIGNED_JOB: Trusted, job path, digest matches the body. The job in the
            body runs.

        INVALID_SIGNATURE: Trusted, job path, digest missing or wrong.
            Forbidden, indistinguishable from UNTRUSTED_ORIGIN to the caller.
    """

    NOT_DAEMON_TRAFFIC = "not_daemon_traffic"
    UNTRUSTED_ORIGIN = "untrusted_origin"
    PERIODIC_TASK = "periodic_task"
    SIGNED_JOB = "signed_job"
    INVALID_SIGNATURE = "invalid_signature"

    def __str__(self) -> str:
        return self.value

    @property
    def is_forbidden(self) -> bool:
        return self in (TrustDecision.UNTRUSTED_ORIGIN, TrustDecision.INVALID_SIGNATURE)
