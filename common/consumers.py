# common/consumers.py

import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import JsonWebsocketConsumer

from .notifier import GLOBAL_GROUP

logger = logging.getLogger(__name__)

ROOMS = ('projects', 'blogs', 'jobs', 'users')


class ChangeFeedConsumer(JsonWebsocketConsumer):
    """
    Live feed of record changes. Every connection receives the global
    channel; clients opt into a per-kind room with
    {"action": "join", "room": "projects"} and leave it with "leave".
    """

    def connect(self):
        self.rooms = set()
        async_to_sync(self.channel_layer.group_add)(GLOBAL_GROUP, self.channel_name)
        self.accept()
        logger.debug(f"Socket {self.channel_name} connected")

    def disconnect(self, code):
        for group in {GLOBAL_GROUP, *getattr(self, "rooms", ())}:
            async_to_sync(self.channel_layer.group_discard)(group, self.channel_name)
        logger.debug(f"Socket {self.channel_name} disconnected")

    def receive_json(self, content, **kwargs):
        action = content.get('action')
        room = content.get('room')
        if room not in ROOMS or action not in ('join', 'leave'):
            self.send_json({'error': 'Unknown action or room', 'rooms': list(ROOMS)})
            return

        if action == 'join':
            async_to_sync(self.channel_layer.group_add)(room, self.channel_name)
            self.rooms.add(room)
        else:
            async_to_sync(self.channel_layer.group_discard)(room, self.channel_name)
            self.rooms.discard(room)
        self.send_json({'action': action, 'room': room})

    def record_changed(self, message):
        # a client in both "global" and a room receives the event twice
        self.send_json({
            'event': message['event'],
            'topic': message['topic'],
            'data': message['payload'],
        })
