"""Conversations, messages and the notification they trigger."""

from uuid import UUID

import pytest
from sqlalchemy.exc import SQLAlchemyError

import revistete.core.database as db_module
from conftest import API
from revistete.models.message import Conversation, Message
from revistete.models.notification import Notification, NotificationType


def send(client, sender, text, recipient=None, conversation_id=None):
    if conversation_id:
        return client.post(f"{API}/messages/{conversation_id}", json={"message": text}, headers=sender["headers"])
    return client.post(f"{API}/messages", json={"recipient_id": recipient["id"], "message": text},
                       headers=sender["headers"])


def test_first_message_opens_conversation_and_notifies(client, db, ana, bruno):
    response = send(client, ana, "hola", recipient=bruno)
    assert response.status_code == 201
    body = response.json()
    assert body["message"]["body"] == "hola"
    assert body["message"]["sender"]["name"] == "Ana"

    conversation = db.query(Conversation).one()
    assert {str(p) for p in conversation.participant_ids} == {ana["id"], bruno["id"]}
    message = db.query(Message).one()
    assert conversation.last_message_id == message.id
    assert str(conversation.id) == body["conversation_id"]

    notification = db.query(Notification).one()
    assert str(notification.user_id) == bruno["id"]
    assert notification.type == NotificationType.MESSAGE
    assert str(notification.related_user_id) == ana["id"]
    assert notification.related_conversation_id == conversation.id
    assert "hola" in notification.body


def test_reply_in_either_direction_reuses_conversation(client, db, ana, bruno):
    first = send(client, ana, "¿Sigue disponible?", recipient=bruno).json()
    send(client, bruno, "Sí", recipient=ana)
    reply = send(client, ana, "Genial", conversation_id=first["conversation_id"])
    assert reply.status_code == 201

    assert db.query(Conversation).count() == 1
    assert db.query(Message).count() == 3
    assert db.query(Notification).filter(Notification.user_id == UUID(bruno["id"])).count() == 2


@pytest.mark.parametrize("length", [1, 1000])
def test_body_length_boundaries_accepted(client, ana, bruno, length):
    assert send(client, ana, "x" * length, recipient=bruno).status_code == 201


@pytest.mark.parametrize("text", ["", "   \n ", "x" * 1001])
def test_body_length_violations_rejected(client, db, ana, bruno, text):
    response = send(client, ana, text, recipient=bruno)
    assert response.status_code == 400
    assert db.query(Message).count() == 0
    assert db.query(Conversation).count() == 0


def test_body_is_trimmed(client, ana, bruno):
    response = send(client, ana, "   hola   ", recipient=bruno)
    assert response.json()["message"]["body"] == "hola"


def test_cannot_message_self(client, db, ana):
    response = send(client, ana, "hola yo", recipient=ana)
    assert response.status_code == 400
    assert db.query(Conversation).count() == 0


def test_unknown_recipient(client, ana):
    response = client.post(f"{API}/messages", json={
        "recipient_id": "00000000-0000-0000-0000-000000000000", "message": "hola",
    }, headers=ana["headers"])
    assert response.status_code == 404


def test_recipient_id_required_for_new_conversation(client, ana):
    response = client.post(f"{API}/messages", json={"message": "hola"}, headers=ana["headers"])
    assert response.status_code == 400


def test_outsider_cannot_use_conversation(client, ana, bruno, carla):
    conversation_id = send(client, ana, "hola", recipient=bruno).json()["conversation_id"]

    assert send(client, carla, "intrusa", conversation_id=conversation_id).status_code == 403
    assert client.get(f"{API}/messages/{conversation_id}", headers=carla["headers"]).status_code == 403


def test_missing_conversation(client, ana):
    missing = "00000000-0000-0000-0000-000000000000"
    assert send(client, ana, "hola", conversation_id=missing).status_code == 404
    assert client.get(f"{API}/messages/{missing}", headers=ana["headers"]).status_code == 404


def test_listing_messages_marks_other_party_read_once(client, ana, bruno):
    conversation_id = send(client, ana, "uno", recipient=bruno).json()["conversation_id"]
    send(client, ana, "dos", conversation_id=conversation_id)
    send(client, bruno, "tres", conversation_id=conversation_id)

    first = client.get(f"{API}/messages/{conversation_id}", headers=bruno["headers"]).json()["messages"]
    assert [m["body"] for m in first] == ["uno", "dos", "tres"]
    from_ana = [m for m in first if m["sender_id"] == ana["id"]]
    own = [m for m in first if m["sender_id"] == bruno["id"]]
    assert all(m["is_read"] and m["read_at"] for m in from_ana)
    assert own[0]["is_read"] is False

    second = client.get(f"{API}/messages/{conversation_id}", headers=bruno["headers"]).json()["messages"]
    assert [m["read_at"] for m in second if m["sender_id"] == ana["id"]] == [m["read_at"] for m in from_ana]


def test_conversation_list_most_recent_first(client, ana, bruno, carla):
    send(client, ana, "para bruno", recipient=bruno)
    send(client, carla, "para ana", recipient=ana)

    conversations = client.get(f"{API}/messages/conversations", headers=ana["headers"]).json()["conversations"]
    assert [c["participant"]["name"] for c in conversations] == ["Carla", "Bruno"]
    assert conversations[0]["last_message"] == "para ana"
    assert all(c["unread"] == 0 for c in conversations)

    send(client, bruno, "de vuelta", recipient=ana)
    conversations = client.get(f"{API}/messages/conversations", headers=ana["headers"]).json()["conversations"]
    assert conversations[0]["participant"]["name"] == "Bruno"
    assert conversations[0]["last_message"] == "de vuelta"


def test_messaging_requires_session(client, bruno):
    response = client.post(f"{API}/messages", json={"recipient_id": bruno["id"], "message": "hola"})
    assert response.status_code == 401
    assert client.get(f"{API}/messages/conversations").status_code == 401


class _BrokenSession:
    def add(self, obj):
        pass

    def commit(self):
        raise SQLAlchemyError("store unavailable")

    def rollback(self):
        pass

    def close(self):
        pass


def test_notification_failure_does_not_fail_send(client, db, ana, bruno, monkeypatch):
    monkeypatch.setattr(db_module, "SessionLocal", _BrokenSession)

    response = send(client, ana, "hola", recipient=bruno)
    assert response.status_code == 201
    assert db.query(Message).count() == 1
    assert db.query(Notification).count() == 0
