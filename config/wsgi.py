"""
WSGI config for sqsgate.

Elastic Beanstalk worker environments point the SQS daemon at this
application; the same process also serves ordinary web traffic, which the
SqsMessageConsumerMiddleware passes through untouched.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

application = get_wsgi_application()
