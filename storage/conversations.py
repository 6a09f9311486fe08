"""Persistence helpers for conversations."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel

from .sqlite import get_conn


class ConversationRecord(BaseModel):
    conversation_id: str
    user_id: str
    started_at: str
    ended_at: Optional[str] = None


def _row_to_conversation(row) -> ConversationRecord:
    return ConversationRecord(
        conversation_id=row["conversation_id"],
        user_id=row["user_id"],
        started_at=row["started_at"],
        ended_at=row["ended_at"],
    )


def create_conversation(user_id: str) -> ConversationRecord:
    """Insert a new open conversation owned by ``user_id``."""

    record = ConversationRecord(
        conversation_id=uuid.uuid4().hex,
        user_id=user_id,
        started_at=dt.datetime.now(dt.timezone.utc).isoformat(),
    )
    with get_conn() as conn:
        conn.execute(
            "INSERT INTO conversations (conversation_id, user_id, started_at) VALUES (?, ?, ?)",
            (record.conversation_id, record.user_id, record.started_at),
        )
    return record


def get_conversation(conversation_id: str) -> Optional[ConversationRecord]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT conversation_id, user_id, started_at, ended_at FROM conversations WHERE conversation_id = ?",
            (conversation_id,),
        ).fetchone()
    return _row_to_conversation(row) if row else None


def list_conversations(user_id: str) -> List[ConversationRecord]:
    """Conversations of ``user_id``, most recently started first."""

    with get_conn() as conn:
        rows = conn.execute(
            """SELECT conversation_id, user_id, started_at, ended_at
               FROM conversations
               WHERE user_id = ?
               ORDER BY started_at DESC, conversation_id DESC""",
            (user_id,),
        ).fetchall()
    return [_row_to_conversation(row) for row in rows]


def end_conversation(conversation_id: str) -> Optional[ConversationRecord]:
    """Set ``ended_at`` once; repeated calls keep the first timestamp."""

    now = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        conn.execute(
            "UPDATE conversations SET ended_at = COALESCE(ended_at, ?) WHERE conversation_id = ?",
            (now, conversation_id),
        )
        row = conn.execute(
            "SELECT conversation_id, user_id, started_at, ended_at FROM conversations WHERE conversation_id = ?",
            (conversation_id,),
        ).fetchone()
    return _row_to_conversation(row) if row else None
