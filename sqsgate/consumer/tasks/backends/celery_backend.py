"""
Celery task backend.

Looks periodic tasks and jobs up by name in a Celery app's task registry and
runs them eagerly with ``Task.apply``: in this process, in this request, with
no broker involved. The SQS daemon already is the queue; Celery only provides
the task definitions.

Task names are Celery task names, so a cron.yaml entry for::

    @shared_task(name="CleanupTask")
    def cleanup(): ...

must be named ``CleanupTask``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from celery import current_app
from celery.exceptions import NotRegistered

from sqsgate.consumer.exceptions import TaskResolutionError
from sqsgate.consumer.tasks.backends.base import TaskBackend

if TYPE_CHECKING:
    from celery import Celery
    from celery import Task

    from sqsgate.consumer.jobs import JobDescription

logger = logging.getLogger(__name__)


class CeleryTaskBackend(TaskBackend):
    """Run registered Celery tasks eagerly, re-raising their errors."""

    def __init__(self, app: Celery | None = None):
        self._app = app

    @property
    def app(self) -> Celery:
        return self._app or current_app

    @property
    def backend_name(self) -> str:
        return "celery"

    def _resolve(self, name: str | None, kind: str) -> Task:
        if not name:
            msg = f"No {kind} name given"
            raise TaskResolutionError(msg)
        try:
            return self.app.tasks[name]
        except NotRegistered as exc:
            msg = f"No Celery task registered under the name {name!r}"
            raise TaskResolutionError(msg) from exc

    def run_periodic_task(self, name: str) -> None:
        task = self._resolve(name, "periodic task")
        logger.info("Running periodic task %s eagerly via Celery", name)
        task.apply(throw=True)

    def run_job(self, job: JobDescription) -> None:
        task = self._resolve(job.job_class, "job")
        logger.info(
            "Running job %s (job_id=%s) eagerly via Celery",
            job.job_class,
            job.job_id,
        )
        task.apply(
            args=job.arguments,
            kwargs=job.keyword_arguments,
            task_id=job.job_id,
            throw=True,
        )

    def task_names(self) -> dict[str, list[str]]:
        names = sorted(name for name in self.app.tasks if not name.startswith("celery."))
        return {"celery_tasks": names}
