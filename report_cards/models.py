from __future__ import annotations  # Report card domain models

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMPTY_SUMMARY = "No conversation history available."


def _as_list(value: Any) -> List[Any]:  # Coerce null/scalar model output into a list
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return [value]


class _CamelModel(BaseModel):  # Accept and emit camelCase keys from the extraction prompt
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StudentProfile(_CamelModel):  # Identity and academic basics
    name: Optional[str] = None
    age: Optional[str] = None
    education_level: Optional[str] = Field(default=None, alias="educationLevel")
    institution: Optional[str] = None
    favorite_subjects: List[str] = Field(default_factory=list, alias="favoriteSubjects")
    challenging_subjects: List[str] = Field(default_factory=list, alias="challengingSubjects")

    @field_validator("age", mode="before")
    @classmethod
    def _age_text(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("favorite_subjects", "challenging_subjects", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[Any]:
        return _as_list(value)


class LearningProfile(_CamelModel):  # How the student prefers to learn
    preferred_style: Optional[str] = Field(default=None, alias="preferredStyle")
    study_preferences: Optional[str] = Field(default=None, alias="studyPreferences")
    ideal_environment: Optional[str] = Field(default=None, alias="idealEnvironment")
    time_management: Optional[str] = Field(default=None, alias="timeManagement")


class Goals(_CamelModel):  # Short and long term aspirations
    short_term: Optional[str] = Field(default=None, alias="shortTerm")
    long_term: Optional[str] = Field(default=None, alias="longTerm")
    career_aspiration: Optional[str] = Field(default=None, alias="careerAspiration")


class ReportCard(_CamelModel):  # Structured profile derived from a transcript
    student_profile: Optional[StudentProfile] = Field(default=None, alias="studentProfile")
    personality_insights: List[str] = Field(default_factory=list, alias="personalityInsights")
    learning_profile: Optional[LearningProfile] = Field(default=None, alias="learningProfile")
    strengths: List[str] = Field(default_factory=list)
    growth_areas: List[str] = Field(default_factory=list, alias="growthAreas")
    interests: List[str] = Field(default_factory=list)
    goals: Optional[Goals] = None
    recommendations: List[str] = Field(default_factory=list)
    overall_summary: str = Field(default=EMPTY_SUMMARY, alias="overallSummary")

    @field_validator(
        "personality_insights",
        "strengths",
        "growth_areas",
        "interests",
        "recommendations",
        mode="before",
    )
    @classmethod
    def _lists(cls, value: Any) -> List[Any]:
        return _as_list(value)

    @field_validator("overall_summary", mode="before")
    @classmethod
    def _summary(cls, value: Any) -> Any:
        return EMPTY_SUMMARY if value is None else value

    def to_payload(self) -> dict:  # camelCase JSON shape served to clients
        return self.model_dump(by_alias=True, mode="json")


def empty_report_card(summary: str = EMPTY_SUMMARY) -> ReportCard:  # Canonical card with no structured content
    return ReportCard(overall_summary=summary)


__all__ = [
    "EMPTY_SUMMARY",
    "Goals",
    "LearningProfile",
    "ReportCard",
    "StudentProfile",
    "empty_report_card",
]
