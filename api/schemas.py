"""Pydantic schemas for the interview HTTP API."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class StartSessionReq(BaseModel):
    email: Optional[str] = None


class StartSessionResp(BaseModel):
    userId: str
    email: str
    displayName: Optional[str] = None
    isNewUser: bool
    questionCount: int
    interviewTitle: str


class ChatReq(BaseModel):
    userId: Optional[str] = None
    message: Optional[str] = None
    conversationId: Optional[str] = None


class QuestionProgressPayload(BaseModel):
    current: int
    total: int


class ChatResp(BaseModel):
    response: str
    conversationId: str
    timestamp: str
    questionProgress: QuestionProgressPayload


class MessagePayload(BaseModel):
    id: str
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: str


class HistoryResp(BaseModel):
    conversationId: str
    userId: str
    startedAt: str
    endedAt: Optional[str] = None
    messages: List[MessagePayload] = Field(default_factory=list)


class EndConversationResp(BaseModel):
    conversationId: str
    endedAt: Optional[str] = None


class ConversationReport(BaseModel):
    conversationId: str
    startedAt: str
    endedAt: Optional[str] = None
    messageCount: int
    messages: List[MessagePayload] = Field(default_factory=list)


class UserReportResp(BaseModel):
    userId: str
    userCreatedAt: str
    conversations: List[ConversationReport] = Field(default_factory=list)
    totalConversations: int
    totalMessages: int
    aiSummary: str
    generatedAt: str


class UserSummaryResp(BaseModel):
    userId: str
    totalMessages: int
    aiSummary: str
    generatedAt: str


class PublicSettingsResp(BaseModel):
    questionCount: int
    interviewTitle: str


class AdminLoginReq(BaseModel):
    password: Optional[str] = None


class AdminLoginResp(BaseModel):
    success: bool
    message: str


class SettingUpdateReq(BaseModel):
    key: Optional[str] = None
    value: Optional[Any] = None


class SettingUpdateResp(BaseModel):
    success: bool
    key: str
    value: str


class StudentSummary(BaseModel):
    userId: str
    email: Optional[str] = None
    name: Optional[str] = None
    createdAt: str
    totalConversations: int
    totalMessages: int
    lastActive: str


class StudentReportResp(BaseModel):
    userId: str
    userCreatedAt: str
    reportCard: Dict[str, Any]
    totalConversations: int
    totalMessages: int
    generatedAt: str
