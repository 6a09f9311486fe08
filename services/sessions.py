"""Interview session controller: one request/response turn at a time.

Concurrent ``submit_turn`` calls on the same conversation are not serialized.
Their history reads can interleave, so the model may see duplicated or
out-of-order context. Callers that need strict ordering must send turns of a
conversation one at a time.
"""
from __future__ import annotations

import datetime as dt
import logging
import re
import time
from typing import List, Optional

from pydantic import BaseModel

from agents.interviewer import compose_instructions, compose_turn_context, generate_reply
from config.settings import settings as app_settings
from observability import log_event
from services.errors import AuthorizationError, NotFoundError, UpstreamError, ValidationError
from services.interview_settings import InterviewSettings, SettingsProvider, question_budget
from services.names import CUE_MATCHERS, DEFAULT_MATCHERS, extract_name
from services.progress import compute_progress
from storage import conversations, messages, users
from storage.conversations import ConversationRecord
from storage.messages import MessageRecord

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class SessionStart(BaseModel):
    user_id: str
    email: str
    display_name: Optional[str] = None
    is_new_user: bool
    question_budget: int


class QuestionProgress(BaseModel):
    current: int
    total: int


class TurnResult(BaseModel):
    response: str
    conversation_id: str
    timestamp: str
    progress: QuestionProgress


class ConversationHistory(BaseModel):
    conversation: ConversationRecord
    messages: List[MessageRecord]


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case ``email``; raise if it is not ``local@domain.tld``."""

    value = (email or "").strip().lower()
    if not value or not EMAIL_PATTERN.match(value):
        raise ValidationError("A valid email address is required")
    return value


def _asked_for_name(history: List[MessageRecord]) -> bool:
    """True before the first interviewer reply or when the last one asks for a name."""

    for entry in reversed(history):
        if entry.role == "assistant":
            return "name" in entry.content.lower()
    return True


class InterviewSessionController:
    """Orchestrates session start, turns, history reads and conversation end."""

    def __init__(
        self,
        settings: Optional[SettingsProvider] = None,
        *,
        history_limit: Optional[int] = None,
        name_scan_turns: Optional[int] = None,
    ) -> None:
        self._settings = settings if settings is not None else InterviewSettings()
        self._history_limit = history_limit if history_limit is not None else app_settings.HISTORY_LIMIT
        self._name_scan_turns = name_scan_turns if name_scan_turns is not None else app_settings.NAME_SCAN_TURNS

    def start_session(self, email: Optional[str]) -> SessionStart:
        normalized = normalize_email(email)
        user, created = users.get_or_create_user(normalized)
        budget = question_budget(self._settings)
        log_event("session_started", None, user_id=user.user_id, outcome="created" if created else "existing")
        return SessionStart(
            user_id=user.user_id,
            email=normalized,
            display_name=user.name,
            is_new_user=created,
            question_budget=budget,
        )

    def submit_turn(
        self,
        user_id: Optional[str],
        message: Optional[str],
        conversation_id: Optional[str] = None,
    ) -> TurnResult:
        if not user_id or not message or not message.strip():
            raise ValidationError("userId and message are required")

        user = users.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)

        if conversation_id:
            conversation = conversations.get_conversation(conversation_id)
            if conversation is None:
                raise NotFoundError("conversation", conversation_id)
            if conversation.user_id != user_id:
                raise AuthorizationError("This conversation does not belong to the specified user")
        else:
            conversation = conversations.create_conversation(user_id)
            log_event("conversation_created", conversation.conversation_id, user_id=user_id)
        active_id = conversation.conversation_id

        history = messages.recent_messages(active_id, self._history_limit)
        current = messages.count_user_messages(active_id) + 1
        progress = compute_progress(question_budget(self._settings), current)

        instructions = compose_instructions(progress.total, progress.current)
        context = compose_turn_context(instructions, history, message)
        started = time.time()
        try:
            reply = generate_reply(context)
        except UpstreamError as exc:
            log_event("turn_failed", active_id, user_id=user_id, error=str(exc))
            raise
        elapsed_ms = int((time.time() - started) * 1000)

        messages.append_message(conversation_id=active_id, role="user", content=message)
        messages.append_message(conversation_id=active_id, role="assistant", content=reply)

        if current <= self._name_scan_turns and not user.name:
            self._remember_name(user_id, active_id, message, history)

        log_event(
            "turn_completed",
            active_id,
            user_id=user_id,
            phase=progress.phase.value,
            current=progress.current,
            total=progress.total,
            ms=elapsed_ms,
        )
        return TurnResult(
            response=reply,
            conversation_id=active_id,
            timestamp=dt.datetime.now(dt.timezone.utc).isoformat(),
            progress=QuestionProgress(current=progress.current, total=progress.total),
        )

    def get_history(self, conversation_id: str) -> ConversationHistory:
        conversation = conversations.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError("conversation", conversation_id)
        return ConversationHistory(
            conversation=conversation,
            messages=messages.all_messages(conversation_id),
        )

    def end_conversation(self, conversation_id: str, user_id: Optional[str] = None) -> ConversationRecord:
        conversation = conversations.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError("conversation", conversation_id)
        if user_id and conversation.user_id != user_id:
            raise AuthorizationError("This conversation does not belong to the specified user")
        ended = conversations.end_conversation(conversation_id)
        if ended is None:
            raise NotFoundError("conversation", conversation_id)
        log_event("conversation_ended", conversation_id, user_id=conversation.user_id)
        return ended

    def _remember_name(
        self,
        user_id: str,
        conversation_id: str,
        message: str,
        history: List[MessageRecord],
    ) -> None:
        # Best effort: a failed name write never fails the turn.
        matchers = DEFAULT_MATCHERS if _asked_for_name(history) else CUE_MATCHERS
        try:
            name = extract_name(message, matchers)
            if name and users.set_user_name(user_id, name):
                log_event("name_detected", conversation_id, user_id=user_id)
        except Exception:  # noqa: BLE001
            logger.warning("Unable to store detected name for user %s", user_id, exc_info=True)


__all__ = [
    "ConversationHistory",
    "InterviewSessionController",
    "QuestionProgress",
    "SessionStart",
    "TurnResult",
    "normalize_email",
]
