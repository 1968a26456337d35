"""
sqsgate: run Elastic Beanstalk SQS daemon messages inside a Django worker.

The version is reported by the ``/health/`` endpoint so a deploy can be
confirmed from the load balancer.
"""

from importlib import metadata

try:
    __version__ = metadata.version("sqsgate")
except metadata.PackageNotFoundError:
    # Source checkout that was never installed with pip.
    __version__ = "0.0.0+unknown"
