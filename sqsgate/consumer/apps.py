import logging

from django.apps import AppConfig
from django.utils.module_loading import autodiscover_modules
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger(__name__)


class ConsumerConfig(AppConfig):
    name = "sqsgate.consumer"
    label = "sqsgate_consumer"
    verbose_name = _("SQS consumer")

    def ready(self):
        # Installed apps register handlers in periodic_tasks.py / jobs.py.
        autodiscover_modules("periodic_tasks", "jobs")
        from sqsgate.consumer.tasks.registry import jobs
        from sqsgate.consumer.tasks.registry import periodic_tasks

        logger.debug(
            "SQS consumer ready: %d periodic task(s), %d job(s) registered",
            len(periodic_tasks),
            len(jobs),
        )
