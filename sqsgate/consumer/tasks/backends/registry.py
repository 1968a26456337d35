"""
Task backend factory.

Provides a factory function to get the task backend selected by the
SQSGATE_TASK_BACKEND setting.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

if TYPE_CHECKING:
    from sqsgate.consumer.tasks.backends.base import TaskBackend

logger = logging.getLogger(__name__)

BACKEND_NAMES = ("local", "celery")


@lru_cache(maxsize=4)
def get_task_backend(name: str | None = None) -> TaskBackend:
    """
    Get the task backend registered under ``name``.

    Args:
        name: "local" or "celery". Defaults to SQSGATE_TASK_BACKEND.

    Raises:
        ImproperlyConfigured: If no backend exists under that name.
    """
    name = name or getattr(settings, "SQSGATE_TASK_BACKEND", "local")

    # Import inside each branch so Celery is only imported when selected
    if name == "local":
        from sqsgate.consumer.tasks.backends.local import LocalTaskBackend

        backend: TaskBackend = LocalTaskBackend()
    elif name == "celery":
        from sqsgate.consumer.tasks.backends.celery_backend import CeleryTaskBackend

        backend = CeleryTaskBackend()
    else:
        valid = ", ".join(sorted(BACKEND_NAMES))
        msg = f"Invalid SQSGATE_TASK_BACKEND: {name}. Valid values: {valid}"
        raise ImproperlyConfigured(msg)

    logger.info("Initialized task backend: %s", backend.backend_name)
    return backend


def clear_task_backend_cache() -> None:
    """Clear the cached backend instances."""
    get_task_backend.cache_clear()
