"""
Base class for task backends.

A task backend executes the work carried by a trusted SQS daemon request:
either a periodic task, named by the ``X-Aws-Sqsd-Taskname`` header, or a job
deserialized from the verified message body.

## Design Principles

1. **Synchronous, in-process**: the daemon waits for the HTTP response and
   deletes the message only on 200, so work must finish before we answer.

2. **Errors propagate**: a name that does not resolve, or a handler that
   raises, must surface to the server as an error. Backends never turn a
   failure into success, and never retry; redelivery is the daemon's job.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqsgate.consumer.jobs import JobDescription


class TaskBackend(ABC):
    """
    Abstract base class for task backends.

    Subclasses must implement:
    - `backend_name`: Human-readable name
    - `run_periodic_task()`: Resolve a periodic task by name and run it
    - `run_job()`: Resolve a job by its class name and run it
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Human-readable name for this backend (e.g., 'local', 'celery')."""

    @abstractmethod
    def run_periodic_task(self, name: str) -> None:
        """
        Run the periodic task registered under ``name`` to completion.

        Raises:
            TaskResolutionError: If no task is registered under ``name``.
            Exception: Whatever the task itself raises.
        """

    @abstractmethod
    def run_job(self, job: JobDescription) -> None:
        """
        Run ``job`` to completion.

        Raises:
            TaskResolutionError: If ``job.job_class`` is not registered.
            Exception: Whatever the job itself raises.
        """

    def task_names(self) -> dict[str, list[str]]:
        """Names this backend can resolve, grouped by kind. For diagnostics."""
        return {}
