"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="INgnwuvH37jf6eck2HmmKz8ISsZbDCj8v5YbhI9PXxzOCuBTS7Ns4Y4gZGGFTfDQ",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]
# https://docs.djangoproject.com/en/dev/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    },
}

# SQSGATE
# ------------------------------------------------------------------------------
# Deterministic values; individual tests override them with override_settings
# or by injecting a ConsumerSettings.
SQSGATE_PROCESS_JOBS = True
SQSGATE_PERIODIC_TASKS_ROUTE = "/periodic_tasks"
SQSGATE_SECRET_KEY = "test-sqsgate-secret"
SQSGATE_DIGEST_ALGORITHM = "sha1"
SQSGATE_CONTAINERIZED = False
SQSGATE_TASK_BACKEND = "local"

# CELERY
# ------------------------------------------------------------------------------
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
