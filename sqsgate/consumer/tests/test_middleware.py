"""
Tests for SqsMessageConsumerMiddleware.

The middleware sits in front of the whole application on worker instances.
It must pass ordinary traffic through untouched, refuse daemon requests it
cannot trust, and run each trusted periodic task or signed job exactly once.
"""

import json
from unittest.mock import MagicMock

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from sqsgate.consumer.exceptions import JobDeserializationError
from sqsgate.consumer.exceptions import TaskResolutionError
from sqsgate.consumer.jobs import serialize_job
from sqsgate.consumer.middleware import SqsMessageConsumerMiddleware
from sqsgate.consumer.tests.helpers import daemon_request
from sqsgate.consumer.tests.helpers import sign


def assert_ok(response):
    assert response.status_code == 200
    assert response["Content-Type"] == "text/plain"
    assert response.content == b"OK"


def assert_forbidden(response):
    assert response.status_code == 403
    assert response["Content-Type"] == "text/plain"
    assert response.content == b"Request forbidden!"


class TestOrdinaryTraffic:
    """Requests without a daemon claim go to the application unchanged."""

    @pytest.mark.parametrize(
        "user_agent",
        [None, "", "Mozilla/5.0", "sqsd/1.0", "AWS-SQSD/1.0", "aws-sqs", " aws-sqsd/1.0"],
    )
    def test_forwarded_without_side_effects(
        self,
        rf,
        make_middleware,
        downstream,
        periodic_registry,
        job_registry,
        user_agent,
    ):
        cleanup = MagicMock()
        run_job = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        job_registry.add("X", run_job)
        body = b'{"job":"X"}'
        request = daemon_request(
            rf,
            "/internal/periodic/cleanup",
            body=body,
            user_agent=user_agent,
            task_name="CleanupTask",
            digest=sign(body),
        )

        response = make_middleware()(request)

        downstream.assert_called_once_with(request)
        assert response.content == b"application"
        cleanup.assert_not_called()
        run_job.assert_not_called()

    def test_disabled_processing_forwards_daemon_requests(
        self,
        rf,
        make_middleware,
        downstream,
        periodic_registry,
    ):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(rf, "/internal/periodic/cleanup", task_name="CleanupTask")

        response = make_middleware(enabled=False)(request)

        downstream.assert_called_once_with(request)
        assert response.content == b"application"
        cleanup.assert_not_called()

    def test_enabled_flag_is_read_on_every_request(
        self,
        rf,
        consumer_settings,
        backend,
        downstream,
        periodic_registry,
    ):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        switch = {"on": False}
        middleware = SqsMessageConsumerMiddleware(
            downstream,
            consumer_settings=consumer_settings,
            is_enabled=lambda: switch["on"],
            backend=backend,
        )

        middleware(daemon_request(rf, "/internal/periodic/x", task_name="CleanupTask"))
        cleanup.assert_not_called()

        switch["on"] = True
        assert_ok(
            middleware(daemon_request(rf, "/internal/periodic/x", task_name="CleanupTask")),
        )
        cleanup.assert_called_once_with()


class TestPeriodicTasks:
    def test_local_peer_runs_named_task(self, rf, make_middleware, downstream, periodic_registry):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(
            rf,
            "/internal/periodic/cleanup",
            remote_addr="127.0.0.1",
            task_name="CleanupTask",
        )

        response = make_middleware()(request)

        assert_ok(response)
        cleanup.assert_called_once_with()
        downstream.assert_not_called()

    def test_public_peer_is_forbidden(self, rf, make_middleware, downstream, periodic_registry):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(
            rf,
            "/internal/periodic/cleanup",
            remote_addr="203.0.113.5",
            task_name="CleanupTask",
        )

        response = make_middleware(containerized=False)(request)

        assert_forbidden(response)
        cleanup.assert_not_called()
        downstream.assert_not_called()

    def test_bridge_peer_outside_container_is_forbidden(
        self,
        rf,
        make_middleware,
        periodic_registry,
    ):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(
            rf,
            "/internal/periodic/cleanup",
            remote_addr="172.17.0.1",
            task_name="CleanupTask",
        )

        assert_forbidden(make_middleware(containerized=False)(request))
        cleanup.assert_not_called()

    def test_bridge_peer_inside_container_runs_task(
        self,
        rf,
        make_middleware,
        periodic_registry,
    ):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(
            rf,
            "/internal/periodic/cleanup",
            remote_addr="172.18.0.1",
            task_name="CleanupTask",
        )

        assert_ok(make_middleware(containerized=True)(request))
        cleanup.assert_called_once_with()

    def test_periodic_task_needs_no_digest(self, rf, make_middleware, periodic_registry):
        cleanup = MagicMock()
        periodic_registry.add("CleanupTask", cleanup)
        request = daemon_request(
            rf,
            "/internal/periodic",
            body=b"{}",
            task_name="CleanupTask",
            digest=None,
        )

        assert_ok(make_middleware()(request))
        cleanup.assert_called_once_with()

    def test_unknown_task_name_propagates(self, rf, make_middleware):
        request = daemon_request(rf, "/internal/periodic/x", task_name="NoSuchTask")

        with pytest.raises(TaskResolutionError):
            make_middleware()(request)

    def test_missing_task_name_propagates(self, rf, make_middleware):
        request = daemon_request(rf, "/internal/periodic/x")

        with pytest.raises(TaskResolutionError):
            make_middleware()(request)

    def test_task_failure_propagates(self, rf, make_middleware, periodic_registry):
        periodic_registry.add("Broken", MagicMock(side_effect=RuntimeError("boom")))
        request = daemon_request(rf, "/internal/periodic/x", task_name="Broken")

        with pytest.raises(RuntimeError, match="boom"):
            make_middleware()(request)


class TestSignedJobs:
    def test_container_bridge_peer_runs_signed_job(
        self,
        rf,
        make_middleware,
        downstream,
        job_registry,
    ):
        run_x = MagicMock()
        job_registry.add("X", run_x)
        body = b'{"job":"X"}'
        request = daemon_request(
            rf,
            "/jobs/run",
            body=body,
            remote_addr="172.17.0.2",
            digest=sign(body),
        )

        response = make_middleware(containerized=True)(request)

        assert_ok(response)
        run_x.assert_called_once_with()
        downstream.assert_not_called()

    def test_job_arguments_are_passed_through(self, rf, make_middleware, job_registry):
        send_receipt = MagicMock()
        job_registry.add("SendReceipt", send_receipt)
        body = serialize_job("SendReceipt", 42, "eur", resend=True)
        request = daemon_request(rf, "/", body=body, digest=sign(body))

        assert_ok(make_middleware()(request))
        send_receipt.assert_called_once_with(42, "eur", resend=True)

    def test_handler_sees_original_payload(self, rf, make_middleware, job_registry):
        payload = {"job_class": "Echo", "arguments": [{"nested": [1, 2, 3]}, "ü"]}
        body = json.dumps(payload).encode()
        received = []
        job_registry.add("Echo", lambda *args: received.append(list(args)))
        request = daemon_request(rf, "/jobs", body=body, digest=sign(body))

        assert_ok(make_middleware()(request))
        assert received == [payload["arguments"]]
        # The body is still readable from the start after the middleware ran.
        assert json.loads(request.read()) == payload

    @pytest.mark.parametrize("digest", [None, "", "not-a-digest"])
    def test_bad_digest_is_forbidden(self, rf, make_middleware, job_registry, digest):
        run_x = MagicMock()
        job_registry.add("X", run_x)
        request = daemon_request(rf, "/jobs/run", body=b'{"job":"X"}', digest=digest)

        assert_forbidden(make_middleware()(request))
        run_x.assert_not_called()

    def test_digest_signed_with_another_secret_is_forbidden(
        self,
        rf,
        make_middleware,
        job_registry,
    ):
        run_x = MagicMock()
        job_registry.add("X", run_x)
        body = b'{"job":"X"}'
        request = daemon_request(
            rf,
            "/jobs/run",
            body=body,
            digest=sign(body, secret=b"someone-elses-secret"),
        )

        assert_forbidden(make_middleware()(request))
        run_x.assert_not_called()

    def test_forbidden_responses_are_identical(self, rf, make_middleware):
        body = b'{"job":"X"}'
        untrusted = make_middleware()(
            daemon_request(rf, "/jobs/run", body=body, remote_addr="198.51.100.7", digest=sign(body)),
        )
        bad_digest = make_middleware()(
            daemon_request(rf, "/jobs/run", body=body, digest="0" * 40),
        )

        assert untrusted.status_code == bad_digest.status_code
        assert untrusted.content == bad_digest.content
        assert untrusted["Content-Type"] == bad_digest["Content-Type"]

    def test_unregistered_job_propagates(self, rf, make_middleware):
        body = b'{"job":"Unknown"}'
        request = daemon_request(rf, "/jobs/run", body=body, digest=sign(body))

        with pytest.raises(TaskResolutionError):
            make_middleware()(request)

    def test_signed_but_malformed_body_propagates(self, rf, make_middleware):
        body = b'["not", "a", "job"]'
        request = daemon_request(rf, "/jobs/run", body=body, digest=sign(body))

        with pytest.raises(JobDeserializationError):
            make_middleware()(request)

    def test_job_failure_propagates(self, rf, make_middleware, job_registry):
        job_registry.add("X", MagicMock(side_effect=ValueError("bad input")))
        body = b'{"job":"X"}'
        request = daemon_request(rf, "/jobs/run", body=body, digest=sign(body))

        with pytest.raises(ValueError, match="bad input"):
            make_middleware()(request)


class TestMiddlewareFromDjangoSettings:
    """The middleware as Django builds it, configured only through settings."""

    @override_settings(SQSGATE_PROCESS_JOBS=False)
    def test_settings_switch_disables_processing(self, rf, downstream, backend):
        middleware = SqsMessageConsumerMiddleware(downstream, backend=backend)

        middleware(daemon_request(rf, "/periodic_tasks", task_name="Anything"))

        downstream.assert_called_once()

    def test_string_containerized_setting_is_rejected_at_startup(
        self,
        settings,
        downstream,
        backend,
    ):
        settings.SQSGATE_CONTAINERIZED = "false"

        with pytest.raises(ImproperlyConfigured, match="SQSGATE_CONTAINERIZED"):
            SqsMessageConsumerMiddleware(downstream, backend=backend)

    def test_uses_configured_route_and_secret(self, rf, settings, downstream, backend, job_registry):
        settings.SQSGATE_PERIODIC_TASKS_ROUTE = "/cron"
        settings.SQSGATE_SECRET_KEY = "settings-secret"
        run_x = MagicMock()
        job_registry.add("X", run_x)
        middleware = SqsMessageConsumerMiddleware(downstream, backend=backend)
        body = b'{"job":"X"}'

        response = middleware(
            daemon_request(rf, "/periodic_tasks", body=body, digest=sign(body, b"settings-secret")),
        )

        # "/periodic_tasks" is not under "/cron", so this is a job.
        assert_ok(response)
        run_x.assert_called_once_with()
