"""Tests for the SQLite migration and write helpers."""
from __future__ import annotations

import os
import sqlite3

import pytest

from services.errors import PersistenceError
from storage import app_settings, conversations, messages, users
from storage.migrate import migrate


def test_migrate_is_idempotent(tmp_db: str):
    migrate(tmp_db)
    assert os.path.exists(tmp_db)
    with sqlite3.connect(tmp_db) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"users", "conversations", "messages", "app_settings"} <= tables


def test_get_or_create_user_is_idempotent():
    first, created = users.get_or_create_user("kid@school.org")
    again, created_again = users.get_or_create_user("kid@school.org")
    assert created is True
    assert created_again is False
    assert again.user_id == first.user_id
    assert users.get_user_by_email("kid@school.org").user_id == first.user_id
    assert users.get_user("missing") is None


def test_set_user_name_only_fills_empty_name():
    user, _ = users.get_or_create_user("kid@school.org")
    assert users.set_user_name(user.user_id, "Aatif") is True
    assert users.set_user_name(user.user_id, "Someone Else") is False
    assert users.get_user(user.user_id).name == "Aatif"


def test_messages_keep_insertion_order():
    user, _ = users.get_or_create_user("kid@school.org")
    conversation = conversations.create_conversation(user.user_id)
    stored = [
        messages.append_message(conversation_id=conversation.conversation_id, role=role, content=f"m{idx}")
        for idx, role in enumerate(["user", "assistant"] * 5)
    ]

    timestamps = [record.timestamp for record in stored]
    assert timestamps == sorted(timestamps)

    everything = messages.all_messages(conversation.conversation_id)
    assert [record.content for record in everything] == [f"m{idx}" for idx in range(10)]

    recent = messages.recent_messages(conversation.conversation_id, 4)
    assert [record.content for record in recent] == ["m6", "m7", "m8", "m9"]

    assert messages.count_user_messages(conversation.conversation_id) == 5

    per_user = messages.messages_for_user(user.user_id)
    assert len(per_user) == 10
    assert all(record.user_id == user.user_id for record in per_user)


def test_invalid_role_rejected():
    user, _ = users.get_or_create_user("kid@school.org")
    conversation = conversations.create_conversation(user.user_id)
    with pytest.raises(Exception):
        messages.append_message(conversation_id=conversation.conversation_id, role="narrator", content="hi")


def test_end_conversation_keeps_first_timestamp():
    user, _ = users.get_or_create_user("kid@school.org")
    conversation = conversations.create_conversation(user.user_id)
    assert conversation.ended_at is None

    first = conversations.end_conversation(conversation.conversation_id)
    second = conversations.end_conversation(conversation.conversation_id)
    assert first.ended_at is not None
    assert second.ended_at == first.ended_at
    assert conversations.end_conversation("missing") is None


def test_list_conversations_scoped_to_user():
    owner, _ = users.get_or_create_user("a@school.org")
    other, _ = users.get_or_create_user("b@school.org")
    conversations.create_conversation(owner.user_id)
    conversations.create_conversation(owner.user_id)
    conversations.create_conversation(other.user_id)
    assert len(conversations.list_conversations(owner.user_id)) == 2
    assert len(conversations.list_conversations(other.user_id)) == 1


def test_app_settings_upsert():
    assert app_settings.get_setting("question_count") is None
    app_settings.set_setting("question_count", "5")
    app_settings.set_setting("question_count", "6")
    assert app_settings.get_setting("question_count") == "6"
    assert app_settings.all_settings() == {"question_count": "6"}


def test_storage_errors_are_wrapped(tmp_db: str):
    with sqlite3.connect(tmp_db) as conn:
        conn.execute("DROP TABLE app_settings")
    with pytest.raises(PersistenceError):
        app_settings.all_settings()
