from types import SimpleNamespace

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.urls import reverse

from clinic.realtime.consumers import UpdatesConsumer
from clinic.services import notify


def _communicator(user):
    communicator = WebsocketCommunicator(UpdatesConsumer.as_asgi(), '/ws/updates/')
    communicator.scope['user'] = user
    return communicator


def _socket_user(pk, role):
    return SimpleNamespace(id=pk, role=role, is_authenticated=True)


def _event(pk=7):
    return {'type': 'entity.changed', 'entity': 'appointment', 'id': pk, 'action': 'updated', 'ts': 'now'}


async def _send(owner_id, event):
    layer = get_channel_layer()
    for group in notify.groups_for(owner_id):
        await layer.group_send(group, event)


# consumers close old DB connections on every message
@pytest.mark.django_db(transaction=True)
def test_anonymous_socket_is_closed():
    async def run():
        connected, code = await _communicator(AnonymousUser()).connect()
        assert not connected
        assert code == 4401

    async_to_sync(run)()


@pytest.mark.django_db(transaction=True)
def test_signed_in_socket_receives_public_changes():
    async def run():
        communicator = _communicator(_socket_user(1, 'patient'))
        connected, _ = await communicator.connect()
        assert connected
        assert (await communicator.receive_json_from())['type'] == 'welcome'
        await _send(None, _event())
        event = await communicator.receive_json_from()
        assert event['entity'] == 'appointment'
        assert event['id'] == 7
        await communicator.disconnect()

    async_to_sync(run)()


@pytest.mark.django_db(transaction=True)
def test_patient_records_reach_owner_and_doctors_only():
    async def run():
        owner = _communicator(_socket_user(101, 'patient'))
        stranger = _communicator(_socket_user(102, 'patient'))
        doctor = _communicator(_socket_user(201, 'doctor'))
        for communicator in (owner, stranger, doctor):
            connected, _ = await communicator.connect()
            assert connected
            await communicator.receive_json_from()

        await _send(101, _event(pk=55))
        assert (await owner.receive_json_from())['id'] == 55
        assert (await doctor.receive_json_from())['id'] == 55
        assert await stranger.receive_nothing()

        for communicator in (owner, stranger, doctor):
            await communicator.disconnect()

    async_to_sync(run)()


def test_groups_for_owner():
    assert notify.groups_for(None) == [notify.GROUP]
    assert notify.groups_for(9) == [notify.DOCTORS_GROUP, 'user.9']


@pytest.mark.django_db
def test_mutations_publish_after_commit(monkeypatch, django_capture_on_commit_callbacks, doctor_client, doctor):
    published = []
    monkeypatch.setattr(notify, 'publish', lambda payload, groups: published.append((payload, groups)))
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        r = doctor_client.post(reverse('doctor_schedule', args=[doctor.id]),
                               {'dayOfWeek': 3, 'startTime': '09:00', 'endTime': '17:00'})
    assert r.status_code == 201
    assert len(callbacks) == 1
    payload, groups = published[0]
    assert payload['type'] == 'entity.changed'
    assert payload['entity'] == 'schedule'
    assert payload['id'] == r.data['schedule']['id']
    assert payload['action'] == 'created'
    assert groups == [notify.GROUP]


@pytest.mark.django_db
def test_patient_data_changes_are_not_broadcast(monkeypatch, django_capture_on_commit_callbacks,
                                                doctor_client, patient):
    published = []
    monkeypatch.setattr(notify, 'publish', lambda payload, groups: published.append((payload, groups)))
    with django_capture_on_commit_callbacks(execute=True):
        r = doctor_client.post(reverse('records_list'), {'patientId': patient.id, 'diagnosis': 'Asthma'})
    assert r.status_code == 201
    payload, groups = published[0]
    assert payload['entity'] == 'medicalRecord'
    assert groups == [notify.DOCTORS_GROUP, f'user.{patient.id}']


@pytest.mark.django_db
def test_reads_do_not_publish(django_capture_on_commit_callbacks, patient_client, doctor):
    with django_capture_on_commit_callbacks() as callbacks:
        patient_client.get(reverse('doctor_schedule', args=[doctor.id]))
    assert callbacks == []
