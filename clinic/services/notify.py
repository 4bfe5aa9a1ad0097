"""
Change notifications for connected clients.

After every successful mutation the views publish a small
``entity.changed`` event so that client-side caches can drop stale
entries and refetch.  Events about a patient's own data go to the
``doctors`` group and to that patient's ``user.<id>`` group only;
events about public data (schedules, doctor profiles) go to the
``updates`` group every signed-in socket joins.  Publishing is deferred
until the surrounding transaction commits; ``robust=True`` makes Django
log a failing channel layer instead of failing the request that caused
the change.
"""
from __future__ import annotations

from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

GROUP = "updates"
DOCTORS_GROUP = "doctors"


def user_group(user_id) -> str:
    return f"user.{user_id}"


def groups_for(owner_id: Optional[int]) -> list[str]:
    if owner_id is None:
        return [GROUP]
    return [DOCTORS_GROUP, user_group(owner_id)]


def publish(payload: dict, groups: list[str]) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    for group in groups:
        async_to_sync(channel_layer.group_send)(group, payload)


def entity_changed(entity: str, pk, action: str, *, owner_id: Optional[int] = None) -> None:
    """Queue an ``entity.changed`` event; ``owner_id`` is the patient the record belongs to."""
    payload = {
        "type": "entity.changed",
        "entity": entity,
        "id": pk,
        "action": action,
        "ts": timezone.now().isoformat(),
    }
    groups = groups_for(owner_id)
    transaction.on_commit(lambda: publish(payload, groups), robust=True)
