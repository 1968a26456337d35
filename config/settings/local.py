from .base import *  # noqa: F403
from .base import LOGGING
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="vYFSWUQZszpWqRqe0s8sdP60HQGXX0t8erh3EZMFOLIxeMCZnDn9zOGnTJGW4n5B",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# SQSGATE
# ------------------------------------------------------------------------------
# Process jobs locally unless explicitly switched off.
SQSGATE_PROCESS_JOBS = env.bool("SQSGATE_PROCESS_JOBS", default=True)

# Logging
# ------------------------------------------------------------------------------
# Make local development chatty so trust decisions show up immediately.
LOGGING["root"]["level"] = "DEBUG"
LOGGING["loggers"]["sqsgate"] = {
    "handlers": ["console"],
    "level": "DEBUG",
    "propagate": False,
}
