"""
End-to-end tests through Django's full request cycle.

The middleware here is the one listed in MIDDLEWARE, configured from the
test settings and running handlers from the default registries.
"""

import pytest

from sqsgate import __version__
from sqsgate.consumer.tasks.registry import jobs
from sqsgate.consumer.tasks.registry import periodic_tasks
from sqsgate.consumer.tests.helpers import SQSD_USER_AGENT
from sqsgate.consumer.tests.helpers import sign

SETTINGS_SECRET = b"test-sqsgate-secret"


@pytest.fixture
def calls():
    recorded = []
    periodic_tasks.add("IntegrationCleanup", lambda: recorded.append("cleanup"))
    jobs.add("IntegrationJob", lambda *args: recorded.append(("job", *args)))
    yield recorded
    periodic_tasks.unregister("IntegrationCleanup")
    jobs.unregister("IntegrationJob")


def test_health_check(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "version": __version__,
        "processing_jobs": True,
    }


def test_health_check_is_get_only(client):
    assert client.post("/health/").status_code == 405


def test_periodic_task_from_local_daemon(client, calls):
    response = client.post(
        "/periodic_tasks",
        HTTP_USER_AGENT=SQSD_USER_AGENT,
        HTTP_X_AWS_SQSD_TASKNAME="IntegrationCleanup",
    )

    assert response.status_code == 200
    assert response.content == b"OK"
    assert calls == ["cleanup"]


def test_signed_job_from_local_daemon(client, calls):
    body = b'{"job_class":"IntegrationJob","arguments":[7]}'

    response = client.post(
        "/",
        data=body,
        content_type="application/json",
        HTTP_USER_AGENT=SQSD_USER_AGENT,
        HTTP_X_AWS_SQSD_ATTR_MESSAGE_DIGEST=sign(body, SETTINGS_SECRET),
    )

    assert response.status_code == 200
    assert calls == [("job", 7)]


def test_daemon_claim_from_public_address_is_forbidden(client, calls):
    response = client.post(
        "/periodic_tasks",
        HTTP_USER_AGENT=SQSD_USER_AGENT,
        HTTP_X_AWS_SQSD_TASKNAME="IntegrationCleanup",
        REMOTE_ADDR="203.0.113.5",
    )

    assert response.status_code == 403
    assert response.content == b"Request forbidden!"
    assert calls == []


def test_ordinary_request_reaches_url_routing(client, calls):
    response = client.post("/periodic_tasks", HTTP_X_AWS_SQSD_TASKNAME="IntegrationCleanup")

    assert response.status_code == 404
    assert calls == []
