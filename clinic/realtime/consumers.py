import json

from channels.generic.websocket import AsyncWebsocketConsumer

from clinic.services.notify import DOCTORS_GROUP, GROUP, user_group


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Push ``entity.changed`` events to signed-in clients.

    Every socket joins the public group and its own user group; doctors
    also join the doctors group.
    """

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close(code=4401)
            return
        self.update_groups = [GROUP, user_group(user.id)]
        if getattr(user, "role", None) == "doctor":
            self.update_groups.append(DOCTORS_GROUP)
        for group in self.update_groups:
            await self.channel_layer.group_add(group, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        for group in getattr(self, "update_groups", []):
            await self.channel_layer.group_discard(group, self.channel_name)

    async def entity_changed(self, event):
        # event: {"type": "entity.changed", "entity": "...", "id": int, "action": "...", "ts": "..."}
        await self.send(json.dumps(event))
