"""Append-only message log, ordered per conversation."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import List, Literal

from pydantic import BaseModel

from .sqlite import get_conn

Role = Literal["user", "assistant", "system"]


class MessagePayload(BaseModel):
    conversation_id: str
    role: Role
    content: str


class MessageRecord(BaseModel):
    message_id: str
    conversation_id: str
    role: Role
    content: str
    timestamp: str


class UserMessageRecord(MessageRecord):
    user_id: str


_COLUMNS = "message_id, conversation_id, role, content, timestamp"


def _row_to_message(row) -> MessageRecord:
    return MessageRecord(
        message_id=row["message_id"],
        conversation_id=row["conversation_id"],
        role=row["role"],
        content=row["content"],
        timestamp=row["timestamp"],
    )


def append_message(**data) -> MessageRecord:
    """Append a message and return the stored record.

    The timestamp is the insertion time, bumped forward to the latest stored
    timestamp of the conversation if the clock went backwards, so timestamp
    order never disagrees with insertion order.
    """

    payload = MessagePayload(**data)
    message_id = uuid.uuid4().hex
    now = dt.datetime.now(dt.timezone.utc)
    with get_conn() as conn:
        row = conn.execute(
            "SELECT MAX(timestamp) AS latest FROM messages WHERE conversation_id = ?",
            (payload.conversation_id,),
        ).fetchone()
        latest = row["latest"] if row else None
        if latest:
            previous = dt.datetime.fromisoformat(latest)
            if previous > now:
                now = previous
        timestamp = now.isoformat(timespec="microseconds")
        conn.execute(
            f"INSERT INTO messages ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (message_id, payload.conversation_id, payload.role, payload.content, timestamp),
        )
    return MessageRecord(
        message_id=message_id,
        conversation_id=payload.conversation_id,
        role=payload.role,
        content=payload.content,
        timestamp=timestamp,
    )


def recent_messages(conversation_id: str, limit: int) -> List[MessageRecord]:
    """Return the newest ``limit`` messages in chronological order."""

    with get_conn() as conn:
        rows = conn.execute(
            f"""SELECT {_COLUMNS} FROM messages
                WHERE conversation_id = ?
                ORDER BY timestamp DESC, seq DESC
                LIMIT ?""",
            (conversation_id, limit),
        ).fetchall()
    return [_row_to_message(row) for row in reversed(rows)]


def count_user_messages(conversation_id: str) -> int:
    """Number of student messages stored for the conversation."""

    with get_conn() as conn:
        row = conn.execute(
            "SELECT COUNT(*) AS total FROM messages WHERE conversation_id = ? AND role = 'user'",
            (conversation_id,),
        ).fetchone()
    return int(row["total"]) if row else 0


def all_messages(conversation_id: str) -> List[MessageRecord]:
    with get_conn() as conn:
        rows = conn.execute(
            f"""SELECT {_COLUMNS} FROM messages
                WHERE conversation_id = ?
                ORDER BY timestamp ASC, seq ASC""",
            (conversation_id,),
        ).fetchall()
    return [_row_to_message(row) for row in rows]


def messages_for_user(user_id: str) -> List[UserMessageRecord]:
    """All messages across the user's conversations, oldest first."""

    with get_conn() as conn:
        rows = conn.execute(
            """SELECT m.message_id, m.conversation_id, m.role, m.content, m.timestamp, c.user_id
               FROM messages m
               JOIN conversations c ON m.conversation_id = c.conversation_id
               WHERE c.user_id = ?
               ORDER BY m.timestamp ASC, m.seq ASC""",
            (user_id,),
        ).fetchall()
    return [
        UserMessageRecord(
            message_id=row["message_id"],
            conversation_id=row["conversation_id"],
            role=row["role"],
            content=row["content"],
            timestamp=row["timestamp"],
            user_id=row["user_id"],
        )
        for row in rows
    ]
