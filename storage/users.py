"""Persistence helpers for users."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import List, Optional, Tuple

from pydantic import BaseModel

from .sqlite import get_conn


class UserRecord(BaseModel):
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: str


def _row_to_user(row) -> UserRecord:
    return UserRecord(
        user_id=row["user_id"],
        email=row["email"],
        name=row["name"],
        created_at=row["created_at"],
    )


def get_user(user_id: str) -> Optional[UserRecord]:
    """Return the user with ``user_id`` or ``None``."""

    with get_conn() as conn:
        row = conn.execute(
            "SELECT user_id, email, name, created_at FROM users WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    return _row_to_user(row) if row else None


def get_user_by_email(email: str) -> Optional[UserRecord]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT user_id, email, name, created_at FROM users WHERE email = ?",
            (email,),
        ).fetchone()
    return _row_to_user(row) if row else None


def get_or_create_user(email: str) -> Tuple[UserRecord, bool]:
    """Look up a user by normalized email, creating it when absent.

    Concurrent callers converge on a single row through the UNIQUE email
    constraint; only the caller whose insert landed sees ``created=True``.
    """

    candidate_id = uuid.uuid4().hex
    now = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        cur = conn.execute(
            "INSERT OR IGNORE INTO users (user_id, email, name, created_at) VALUES (?, ?, NULL, ?)",
            (candidate_id, email, now),
        )
        created = cur.rowcount == 1
        row = conn.execute(
            "SELECT user_id, email, name, created_at FROM users WHERE email = ?",
            (email,),
        ).fetchone()
    return _row_to_user(row), created


def set_user_name(user_id: str, name: str) -> bool:
    """Store ``name`` if the user has none yet. Returns whether a row changed."""

    with get_conn() as conn:
        cur = conn.execute(
            "UPDATE users SET name = ? WHERE user_id = ? AND name IS NULL",
            (name, user_id),
        )
        return cur.rowcount == 1


def list_users() -> List[UserRecord]:
    """List users ordered by creation time, newest first."""

    with get_conn() as conn:
        rows = conn.execute(
            "SELECT user_id, email, name, created_at FROM users ORDER BY created_at DESC, user_id DESC"
        ).fetchall()
    return [_row_to_user(row) for row in rows]
