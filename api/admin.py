"""Admin routes guarded by a shared password header."""
from __future__ import annotations

import datetime as dt
import hmac
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response

from api.errors import http_error
from api.schemas import (
    AdminLoginReq,
    AdminLoginResp,
    SettingUpdateReq,
    SettingUpdateResp,
    StudentReportResp,
    StudentSummary,
)
from config.settings import settings
from observability import log_event
from report_cards import ReportCard, render_report_card_pdf, report_filename, synthesize
from report_cards.models import empty_report_card
from services.errors import InterviewError, NotFoundError
from services.interview_settings import QUESTION_COUNT, InterviewSettings
from services.names import CUE_MATCHERS, extract_name
from storage import conversations, messages, users
from storage.messages import UserMessageRecord
from storage.users import UserRecord

logger = logging.getLogger(__name__)

NO_CONVERSATIONS = "No conversations to analyze yet."

router = APIRouter(prefix="/api/admin")


def _password_ok(candidate: Optional[str]) -> bool:
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))


def require_admin(x_admin_password: Optional[str] = Header(default=None)) -> None:
    if not _password_ok(x_admin_password):
        raise HTTPException(status_code=401, detail="Unauthorized")


def _load_user(user_id: str) -> UserRecord:
    user = users.get_user(user_id)
    if user is None:
        raise NotFoundError("student", user_id)
    return user


def _report_card(transcript: List[UserMessageRecord]) -> ReportCard:
    if not transcript:
        return empty_report_card(NO_CONVERSATIONS)
    return synthesize(transcript)


def _display_name(user: UserRecord, transcript: List[UserMessageRecord]) -> Optional[str]:
    if user.name:
        return user.name
    for record in transcript:
        if record.role != "user":
            continue
        name = extract_name(record.content, CUE_MATCHERS)
        if name:
            return name
    return None


@router.post("/login", response_model=AdminLoginResp)
def login(req: AdminLoginReq) -> AdminLoginResp:
    if not req.password:
        raise HTTPException(status_code=400, detail="Password required")
    if not _password_ok(req.password):
        raise HTTPException(status_code=401, detail="Invalid password")
    return AdminLoginResp(success=True, message="Login successful")


@router.get("/settings", response_model=Dict[str, str], dependencies=[Depends(require_admin)])
def get_settings() -> Dict[str, str]:
    try:
        return InterviewSettings().all()
    except InterviewError as exc:
        raise http_error(exc) from exc


@router.put("/settings", response_model=SettingUpdateResp, dependencies=[Depends(require_admin)])
def update_setting(req: SettingUpdateReq) -> SettingUpdateResp:
    if not req.key or req.value is None:
        raise HTTPException(status_code=400, detail="Key and value required")
    value = str(req.value).strip()
    if req.key == QUESTION_COUNT and (not value.isdigit() or int(value) < 1):
        raise HTTPException(status_code=400, detail="question_count must be a positive integer")
    try:
        InterviewSettings().set(req.key, value)
    except InterviewError as exc:
        raise http_error(exc) from exc
    logger.info("Setting updated key=%s", req.key)
    return SettingUpdateResp(success=True, key=req.key, value=value)


@router.get("/students", response_model=List[StudentSummary], dependencies=[Depends(require_admin)])
def list_students() -> List[StudentSummary]:
    summaries: List[StudentSummary] = []
    try:
        for user in users.list_users():
            owned = conversations.list_conversations(user.user_id)
            transcript = messages.messages_for_user(user.user_id)
            last_active = transcript[-1].timestamp if transcript else user.created_at
            summaries.append(
                StudentSummary(
                    userId=user.user_id,
                    email=user.email,
                    name=_display_name(user, transcript),
                    createdAt=user.created_at,
                    totalConversations=len(owned),
                    totalMessages=len(transcript),
                    lastActive=last_active,
                )
            )
    except InterviewError as exc:
        raise http_error(exc) from exc
    return summaries


@router.get(
    "/students/{user_id}/report",
    response_model=StudentReportResp,
    dependencies=[Depends(require_admin)],
)
def student_report(user_id: str) -> StudentReportResp:
    try:
        user = _load_user(user_id)
        owned = conversations.list_conversations(user_id)
        transcript = messages.messages_for_user(user_id)
        card = _report_card(transcript)
    except InterviewError as exc:
        raise http_error(exc) from exc
    log_event("report_generated", None, user_id=user_id, outcome="json")
    return StudentReportResp(
        userId=user_id,
        userCreatedAt=user.created_at,
        reportCard=card.to_payload(),
        totalConversations=len(owned),
        totalMessages=len(transcript),
        generatedAt=dt.datetime.now(dt.timezone.utc).isoformat(),
    )


@router.get("/students/{user_id}/pdf", dependencies=[Depends(require_admin)])
def student_report_pdf(user_id: str) -> Response:
    try:
        _load_user(user_id)
        card = _report_card(messages.messages_for_user(user_id))
    except InterviewError as exc:
        raise http_error(exc) from exc
    try:
        payload = render_report_card_pdf(card)
    except Exception as exc:  # noqa: BLE001
        logger.exception("PDF generation failed")
        raise HTTPException(status_code=500, detail="Failed to generate PDF") from exc
    log_event("report_generated", None, user_id=user_id, outcome="pdf")
    headers = {"Content-Disposition": f'attachment; filename="{report_filename(card)}"'}
    return Response(content=payload, media_type="application/pdf", headers=headers)
