from django.urls import path

from sqsgate.consumer import views as consumer_views

# Daemon requests never reach the URLConf: SqsMessageConsumerMiddleware answers
# them before view resolution. Everything here is ordinary web traffic.
urlpatterns = [
    path("health/", consumer_views.health_check, name="health"),
]
