"""FastAPI routes for interview sessions, chat turns and user reports."""
from __future__ import annotations

import datetime as dt
from typing import Iterable, List

from fastapi import APIRouter

from api.errors import http_error
from api.schemas import (
    ChatReq,
    ChatResp,
    ConversationReport,
    EndConversationResp,
    HistoryResp,
    MessagePayload,
    PublicSettingsResp,
    QuestionProgressPayload,
    StartSessionReq,
    StartSessionResp,
    UserReportResp,
    UserSummaryResp,
)
from report_cards import summarize
from services.errors import InterviewError, NotFoundError
from services.interview_settings import InterviewSettings, interview_title, question_budget
from services.sessions import InterviewSessionController
from storage import conversations, messages, users
from storage.messages import MessageRecord

NO_CONVERSATIONS = "No conversations to summarize."

router = APIRouter(prefix="/api")


def _controller() -> InterviewSessionController:
    return InterviewSessionController(InterviewSettings())


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _message_payloads(records: Iterable[MessageRecord]) -> List[MessagePayload]:
    return [
        MessagePayload(id=record.message_id, role=record.role, content=record.content, timestamp=record.timestamp)
        for record in records
    ]


@router.post("/session/start", response_model=StartSessionResp)
def start_session(req: StartSessionReq) -> StartSessionResp:
    provider = InterviewSettings()
    try:
        started = InterviewSessionController(provider).start_session(req.email)
    except InterviewError as exc:
        raise http_error(exc) from exc
    return StartSessionResp(
        userId=started.user_id,
        email=started.email,
        displayName=started.display_name,
        isNewUser=started.is_new_user,
        questionCount=started.question_budget,
        interviewTitle=interview_title(provider),
    )


@router.post("/chat", response_model=ChatResp)
def chat(req: ChatReq) -> ChatResp:
    try:
        result = _controller().submit_turn(req.userId, req.message, req.conversationId)
    except InterviewError as exc:
        raise http_error(exc) from exc
    return ChatResp(
        response=result.response,
        conversationId=result.conversation_id,
        timestamp=result.timestamp,
        questionProgress=QuestionProgressPayload(current=result.progress.current, total=result.progress.total),
    )


@router.get("/chat/history/{conversation_id}", response_model=HistoryResp)
def history(conversation_id: str) -> HistoryResp:
    try:
        found = _controller().get_history(conversation_id)
    except InterviewError as exc:
        raise http_error(exc) from exc
    return HistoryResp(
        conversationId=found.conversation.conversation_id,
        userId=found.conversation.user_id,
        startedAt=found.conversation.started_at,
        endedAt=found.conversation.ended_at,
        messages=_message_payloads(found.messages),
    )


@router.post("/chat/{conversation_id}/end", response_model=EndConversationResp)
def end_conversation(conversation_id: str) -> EndConversationResp:
    try:
        ended = _controller().end_conversation(conversation_id)
    except InterviewError as exc:
        raise http_error(exc) from exc
    return EndConversationResp(conversationId=ended.conversation_id, endedAt=ended.ended_at)


@router.get("/settings/public", response_model=PublicSettingsResp)
def public_settings() -> PublicSettingsResp:
    provider = InterviewSettings()
    return PublicSettingsResp(questionCount=question_budget(provider), interviewTitle=interview_title(provider))


@router.get("/report/{user_id}", response_model=UserReportResp)
def user_report(user_id: str) -> UserReportResp:
    try:
        user = users.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        entries: List[ConversationReport] = []
        for conversation in conversations.list_conversations(user_id):
            records = messages.all_messages(conversation.conversation_id)
            entries.append(
                ConversationReport(
                    conversationId=conversation.conversation_id,
                    startedAt=conversation.started_at,
                    endedAt=conversation.ended_at,
                    messageCount=len(records),
                    messages=_message_payloads(records),
                )
            )
        transcript = messages.messages_for_user(user_id)
        summary = summarize(transcript) if transcript else NO_CONVERSATIONS
    except InterviewError as exc:
        raise http_error(exc) from exc
    return UserReportResp(
        userId=user_id,
        userCreatedAt=user.created_at,
        conversations=entries,
        totalConversations=len(entries),
        totalMessages=len(transcript),
        aiSummary=summary,
        generatedAt=_now(),
    )


@router.get("/report/{user_id}/summary", response_model=UserSummaryResp)
def user_summary(user_id: str) -> UserSummaryResp:
    try:
        if users.get_user(user_id) is None:
            raise NotFoundError("user", user_id)
        transcript = messages.messages_for_user(user_id)
        summary = summarize(transcript) if transcript else NO_CONVERSATIONS
    except InterviewError as exc:
        raise http_error(exc) from exc
    return UserSummaryResp(
        userId=user_id,
        totalMessages=len(transcript),
        aiSummary=summary,
        generatedAt=_now(),
    )
