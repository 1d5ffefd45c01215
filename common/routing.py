# common/routing.py

from django.urls import path

from .consumers import ChangeFeedConsumer

websocket_urlpatterns = [
    path('ws/changes/', ChangeFeedConsumer.as_asgi()),
]
