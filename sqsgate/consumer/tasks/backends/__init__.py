from sqsgate.consumer.tasks.backends.base import TaskBackend
from sqsgate.consumer.tasks.backends.registry import clear_task_backend_cache
from sqsgate.consumer.tasks.backends.registry import get_task_backend

__all__ = [
    "TaskBackend",
    "clear_task_backend_cache",
    "get_task_backend",
]
