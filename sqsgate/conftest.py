from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.http import HttpResponse

from sqsgate.consumer.environment import StaticContainerProbe
from sqsgate.consumer.environment import clear_container_cache
from sqsgate.consumer.middleware import SqsMessageConsumerMiddleware
from sqsgate.consumer.settings import ConsumerSettings
from sqsgate.consumer.tasks.backends import clear_task_backend_cache
from sqsgate.consumer.tasks.backends.local import LocalTaskBackend
from sqsgate.consumer.tasks.registry import TaskRegistry
from sqsgate.consumer.tests.helpers import TEST_SECRET


@pytest.fixture(autouse=True)
def _clear_caches():
    clear_container_cache()
    clear_task_backend_cache()
    yield
    clear_container_cache()
    clear_task_backend_cache()


@pytest.fixture
def consumer_settings() -> ConsumerSettings:
    return ConsumerSettings(
        process_jobs=True,
        secret_key=TEST_SECRET,
        periodic_tasks_route="/internal/periodic",
    )


@pytest.fixture
def periodic_registry() -> TaskRegistry:
    return TaskRegistry("periodic task")


@pytest.fixture
def job_registry() -> TaskRegistry:
    return TaskRegistry("job")


@pytest.fixture
def backend(periodic_registry, job_registry) -> LocalTaskBackend:
    return LocalTaskBackend(periodic_registry, job_registry)


@pytest.fixture
def downstream() -> MagicMock:
    """Stands in for the rest of the Django middleware chain."""
    return MagicMock(return_value=HttpResponse("application"))


@pytest.fixture
def make_middleware(consumer_settings, backend, downstream):
    def _make(*, containerized: bool = False, enabled: bool = True, **kwargs):
        kwargs.setdefault("consumer_settings", consumer_settings)
        kwargs.setdefault("backend", backend)
        return SqsMessageConsumerMiddleware(
            downstream,
            is_enabled=lambda: enabled,
            probe=StaticContainerProbe(containerized),
            **kwargs,
        )

    return _make
