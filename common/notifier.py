# common/notifier.py
"""
Best-effort broadcast of record changes to live websocket clients.

Every message goes to the record kind's group ("projects", "blogs", ...) and
to the "global" group. Delivery is never acknowledged and never retried; a
missing or failing channel layer only produces a log line.
"""

import json
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

logger = logging.getLogger(__name__)

GLOBAL_GROUP = 'global'
MESSAGE_TYPE = 'record.changed'


def _jsonable(payload):
    # channel layers other than the in-memory one need plain JSON types
    return json.loads(json.dumps(payload, cls=DjangoJSONEncoder))


def _dispatch(topic, event_name, payload):
    try:
        layer = get_channel_layer()
        if layer is None:
            logger.debug(f"No channel layer configured, dropping {event_name}")
            return
        message = {
            'type': MESSAGE_TYPE,
            'topic': topic,
            'event': event_name,
            'payload': _jsonable(payload),
        }
        for group in (GLOBAL_GROUP, topic):
            async_to_sync(layer.group_send)(group, message)
        logger.info(f"Emitted {event_name} to '{topic}'")
    except Exception as e:
        logger.warning(f"Dropping {event_name} notification for '{topic}': {e}")


def notify_change(topic, event_name, payload):
    """
    Queue a change notification to be sent once the current transaction
    commits (immediately when there is none). Never raises.
    """
    try:
        transaction.on_commit(lambda: _dispatch(topic, event_name, payload))
    except Exception as e:
        logger.warning(f"Could not schedule {event_name} notification: {e}")
