"""
In-process registries of periodic tasks and jobs.

Each handler is registered once, under the name the SQS daemon will use to
ask for it, together with the metadata needed to generate Elastic Beanstalk's
``cron.yaml`` (schedule and description).

Usage:

    from sqsgate.consumer.tasks.registry import periodic_tasks

    for task in periodic_tasks:
        print(f"{task.name}: {task.schedule}")

The registries are consumed by:
    - LocalTaskBackend (resolves and runs handlers)
    - render_cron_yaml (emits cron.yaml entries for scheduled tasks)
    - check_sqsgate (reports what is registered)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

from sqsgate.consumer.exceptions import TaskResolutionError

if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredTask:
    """A named handler and its scheduling metadata."""

    name: str
    handler: Callable[..., Any]
    schedule: str | None = None  # Cron expression, e.g. "0 3 * * *"
    description: str = ""

    @property
    def is_scheduled(self) -> bool:
        return bool(self.schedule)


class TaskRegistry:
    """Maps names to handlers for one kind of work ("periodic task" or "job")."""

    def __init__(self, kind: str):
        self.kind = kind
        self._tasks: dict[str, RegisteredTask] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"TaskRegistry({self.kind!r}, {len(self)} registered)"

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[RegisteredTask]:
        return iter(sorted(self._tasks.values(), key=lambda task: task.name))

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def add(
        self,
        name: str,
        handler: Callable[..., Any],
        *,
        schedule: str | None = None,
        description: str = "",
    ) -> RegisteredTask:
        if not callable(handler):
            msg = f"{self.kind} handler for {name!r} is not callable"
            raise TypeError(msg)
        task = RegisteredTask(
            name=name,
            handler=handler,
            schedule=schedule,
            description=description,
        )
        with self._lock:
            existing = self._tasks.get(name)
            if existing is not None and existing.handler is not handler:
                msg = f"{self.kind} {name!r} is already registered to {existing.handler!r}"
                raise ValueError(msg)
            self._tasks[name] = task
        logger.debug("Registered %s %s", self.kind, name)
        return task

    def register(
        self,
        name: str | None = None,
        *,
        schedule: str | None = None,
        description: str = "",
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a handler; the name defaults to ``__name__``."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.add(
                name or handler.__name__,
                handler,
                schedule=schedule,
                description=description or (handler.__doc__ or "").strip(),
            )
            return handler

        return decorator

    def unregister(self, name: str) -> None:
        with self._lock:
            self._tasks.pop(name, None)

    def get(self, name: str) -> RegisteredTask | None:
        return self._tasks.get(name)

    def resolve(self, name: str | None) -> Callable[..., Any]:
        """
        Look up the handler registered under ``name``.

        Raises:
            TaskResolutionError: If no handler is registered under that name.
        """
        task = self._tasks.get(name) if name else None
        if task is None:
            msg = f"No {self.kind} registered under the name {name!r}"
            raise TaskResolutionError(msg)
        return task.handler

    def scheduled(self) -> list[RegisteredTask]:
        return [task for task in self if task.is_scheduled]


periodic_tasks = TaskRegistry("periodic task")
jobs = TaskRegistry("job")


def periodic_task(
    name: str | None = None,
    *,
    schedule: str | None = None,
    description: str = "",
):
    """Register a periodic task handler in the default registry."""
    return periodic_tasks.register(name, schedule=schedule, description=description)


def job(name: str | None = None, *, description: str = ""):
    """Register a job handler in the default registry."""
    return jobs.register(name, description=description)
