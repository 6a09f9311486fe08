"""Lightweight CLI helpers for inspecting students and transcripts."""
from __future__ import annotations

import argparse
from typing import List, Optional

from storage import conversations, messages, users


def format_students() -> List[str]:
    lines: List[str] = []
    for user in users.list_users():
        owned = conversations.list_conversations(user.user_id)
        lines.append(
            f"[{user.created_at}] {user.user_id} {user.email or '-'} name={user.name or '-'} conversations={len(owned)}"
        )
    return lines


def format_transcript(conversation_id: str, limit: Optional[int] = None) -> List[str]:
    if limit:
        records = messages.recent_messages(conversation_id, limit)
    else:
        records = messages.all_messages(conversation_id)
    return [f"[{record.timestamp}] {record.role}: {record.content}" for record in records]


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--students", action="store_true", help="List known students")
    parser.add_argument("--transcript", metavar="CONVERSATION_ID", help="Print a conversation transcript")
    parser.add_argument("--limit", type=int, help="Only show the latest N transcript messages")
    args = parser.parse_args(argv)

    if args.students:
        for line in format_students():
            print(line)
    if args.transcript:
        for line in format_transcript(args.transcript, args.limit):
            print(line)


if __name__ == "__main__":
    main()
