"""
Local task backend.

Runs handlers from the in-process registries in
``sqsgate.consumer.tasks.registry``. This is the default backend.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from sqsgate.consumer.tasks.backends.base import TaskBackend
from sqsgate.consumer.tasks.registry import TaskRegistry
from sqsgate.consumer.tasks.registry import jobs
from sqsgate.consumer.tasks.registry import periodic_tasks

if TYPE_CHECKING:
    from sqsgate.consumer.jobs import JobDescription

logger = logging.getLogger(__name__)


class LocalTaskBackend(TaskBackend):
    """Resolve handlers by name in TaskRegistry instances and call them."""

    def __init__(
        self,
        periodic_registry: TaskRegistry | None = None,
        job_registry: TaskRegistry | None = None,
    ):
        # Registries define __len__, so an empty injected one is falsy.
        self.periodic_registry = (
            periodic_registry if periodic_registry is not None else periodic_tasks
        )
        self.job_registry = job_registry if job_registry is not None else jobs

    @property
    def backend_name(self) -> str:
        return "local"

    def run_periodic_task(self, name: str) -> None:
        handler = self.periodic_registry.resolve(name)
        logger.info("Running periodic task %s", name)
        started = time.monotonic()
        handler()
        logger.info(
            "Periodic task %s finished in %.3fs",
            name,
            time.monotonic() - started,
        )

    def run_job(self, job: JobDescription) -> None:
        handler = self.job_registry.resolve(job.job_class)
        logger.info("Running job %s (job_id=%s)", job.job_class, job.job_id)
        started = time.monotonic()
        handler(*job.arguments, **job.keyword_arguments)
        logger.info(
            "Job %s (job_id=%s) finished in %.3fs",
            job.job_class,
            job.job_id,
            time.monotonic() - started,
        )

    def task_names(self) -> dict[str, list[str]]:
        return {
            "periodic_tasks": [task.name for task in self.periodic_registry],
            "jobs": [task.name for task in self.job_registry],
        }
