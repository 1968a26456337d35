"""
Periodic tasks and jobs runnable by the SQS consumer.

Handlers are registered by name, either in the in-process registries
(``registry.py``) or as Celery tasks, and executed by a task backend
(``backends/``) selected with the SQSGATE_TASK_BACKEND setting.

## Registering handlers

Installed apps declare handlers in a ``periodic_tasks.py`` or ``jobs.py``
module; both are autodiscovered when Django starts:

```python
from sqsgate.consumer.tasks.registry import job, periodic_task


@periodic_task("CleanupTask", schedule="0 3 * * *")
def cleanup():
    ...


@job("SendReceipt")
def send_receipt(order_id, resend=False):
    ...
```

Periodic task names must match the ``name`` of the cron.yaml entry, which the
daemon sends in the ``X-Aws-Sqsd-Taskname`` header. Job names match the
``job_class`` of the message body.
"""
