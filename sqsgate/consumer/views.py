"""
Health check endpoint for the worker.

Elastic Beanstalk's load balancer and the SQS daemon's own health checks hit
this view; it is ordinary web traffic and never touched by the consumer
middleware.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from sqsgate import __version__
from sqsgate.consumer.settings import is_processing_enabled

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """
    Liveness probe.

    Response format:
        {
            "status": "healthy",
            "version": "<sqsgate version>",
            "processing_jobs": true | false
        }
    """
    return JsonResponse(
        {
            "status": "healthy",
            "version": __version__,
            "processing_jobs": is_processing_enabled(),
        },
        status=HTTPStatus.OK,
    )
