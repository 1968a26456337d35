"""
Consumer side of Elastic Beanstalk worker environments.

The SQS daemon (``aws-sqsd``) polls the queue and POSTs every message to the
worker application. ``SqsMessageConsumerMiddleware`` intercepts those requests,
decides whether to believe them and runs the periodic task or signed job they
carry. See ``sqsgate.consumer.middleware`` for the full flow.
"""
