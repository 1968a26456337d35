"""
Base settings shared by every sqsgate deployment.
"""

from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
APPS_DIR = BASE_DIR / "sqsgate"
env = environ.Env()

READ_DOT_ENV_FILE = env.bool("DJANGO_READ_DOT_ENV_FILE", default=False)
if READ_DOT_ENV_FILE:
    # OS environment variables take precedence over variables from .env
    env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = env.bool("DJANGO_DEBUG", False)
# https://docs.djangoproject.com/en/dev/ref/settings/#time-zone
TIME_ZONE = "UTC"
# https://docs.djangoproject.com/en/dev/ref/settings/#language-code
LANGUAGE_CODE = "en-us"
# https://docs.djangoproject.com/en/dev/ref/settings/#use-tz
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#databases
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    ),
}
# https://docs.djangoproject.com/en/stable/ref/settings/#std:setting-DEFAULT_AUTO_FIELD
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#root-urlconf
ROOT_URLCONF = "config.urls"
# https://docs.djangoproject.com/en/dev/ref/settings/#wsgi-application
WSGI_APPLICATION = "config.wsgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
]
LOCAL_APPS = [
    "sqsgate.consumer",
]
# https://docs.djangoproject.com/en/dev/ref/settings/#installed-apps
INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

# MIDDLEWARE
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#middleware
# The SQS consumer answers daemon requests itself, so it must sit in front of
# CSRF protection: the daemon never sends a CSRF token.
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "sqsgate.consumer.middleware.SqsMessageConsumerMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# STATIC
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#static-root
STATIC_ROOT = str(BASE_DIR / "staticfiles")
# https://docs.djangoproject.com/en/dev/ref/settings/#static-url
STATIC_URL = "/static/"

# SECURITY
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#x-frame-options
X_FRAME_OPTIONS = "DENY"

# LOGGING
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#logging
# See https://docs.djangoproject.com/en/dev/topics/logging for
# more details on how to customize your logging configuration.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {},
}

# CELERY
# ------------------------------------------------------------------------------
# Only used when SQSGATE_TASK_BACKEND=celery. Tasks are always run eagerly
# inside the request, so no broker round-trip happens on the consumer side.
CELERY_BROKER_URL = env("CELERY_BROKER_URL", default="memory://")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_RESULT_BACKEND = None
CELERY_TASK_IGNORE_RESULT = True

# SQSGATE
# ------------------------------------------------------------------------------
# Master switch. Read on every request so it can be flipped without a restart
# of the consumer component.
SQSGATE_PROCESS_JOBS = env.bool("SQSGATE_PROCESS_JOBS", default=False)
# Requests from the daemon whose path starts with this prefix are periodic
# tasks (Elastic Beanstalk cron.yaml entries); everything else is a job.
# Compared against the URL-encoded path and query string, so give non-ASCII
# characters and spaces percent-encoded ("/t%C3%A2ches", not "/tâches").
SQSGATE_PERIODIC_TASKS_ROUTE = env(
    "SQSGATE_PERIODIC_TASKS_ROUTE",
    default="/periodic_tasks",
)
# Shared with the producing web environment. Falls back to SECRET_KEY when
# empty, so both environments must then share SECRET_KEY.
SQSGATE_SECRET_KEY = env("SQSGATE_SECRET_KEY", default="")
SQSGATE_DIGEST_ALGORITHM = env("SQSGATE_DIGEST_ALGORITHM", default="sha1")
# Docker default bridge and Docker Compose default bridge.
SQSGATE_TRUSTED_BRIDGE_NETWORKS = env.list(
    "SQSGATE_TRUSTED_BRIDGE_NETWORKS",
    default=["172.17.0.0/24", "172.18.0.0/24"],
)
# None means detect from /proc/1/cgroup.
SQSGATE_CONTAINERIZED = env.bool("SQSGATE_CONTAINERIZED", default=None)
# "local" runs handlers from the in-process registries, "celery" runs
# registered Celery tasks eagerly.
SQSGATE_TASK_BACKEND = env("SQSGATE_TASK_BACKEND", default="local")
