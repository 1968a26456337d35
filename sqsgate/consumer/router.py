from __future__ import annotations

from typing import TYPE_CHECKING

from sqsgate.consumer.constants import TASK_NAME_HEADER
from sqsgate.consumer.constants import Route
from sqsgate.consumer.exceptions import TaskResolutionError

if TYPE_CHECKING:
    from django.http import HttpRequest


class RequestRouter:
    """Splits accepted daemon requests into periodic tasks and jobs by path prefix."""

    def __init__(self, periodic_tasks_route: str):
        self.periodic_tasks_route = periodic_tasks_route
        self._prefix_length = len(periodic_tasks_route)

    def is_periodic_task(self, request: HttpRequest) -> bool:
        """
        Literal prefix match against ``request.get_full_path()``.

        The full path is URL-encoded and includes the query string, so the
        configured route must be percent-encoded too.
        """
        # An empty route would match everything; treat it as "no periodic tasks".
        if not self._prefix_length:
            return False
        full_path = request.get_full_path()
        return full_path[: self._prefix_length] == self.periodic_tasks_route

    def route(self, request: HttpRequest) -> Route:
        if self.is_periodic_task(request):
            return Route.PERIODIC_TASK
        return Route.JOB

    def task_name(self, request: HttpRequest) -> str:
        """
        The periodic task name sent by the daemon.

        Raises:
            TaskResolutionError: If the request carries no task name.
        """
        name = (request.headers.get(TASK_NAME_HEADER) or "").strip()
        if not name:
            msg = f"Periodic task request without a {TASK_NAME_HEADER} header"
            raise TaskResolutionError(msg)
        return name
