"""
Celery application configuration for sqsgate.

The SQS consumer never pulls from a broker itself: the Elastic Beanstalk SQS
daemon does the polling and POSTs each message to the worker. When
SQSGATE_TASK_BACKEND is "celery", the consumer looks registered Celery tasks
up by name in this app and runs them eagerly inside the request, which lets a
project reuse task definitions it already has.

Configuration:
  - Broker: CELERY_BROKER_URL (defaults to memory://, unused by the consumer)
  - Result backend: None
  - Task serialization: JSON
"""

import logging
import os

from celery import Celery

logger = logging.getLogger(__name__)

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

app = Celery("sqsgate")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()
