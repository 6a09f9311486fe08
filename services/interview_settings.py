"""Admin-managed interview settings with documented defaults."""
from __future__ import annotations

from typing import Dict, Optional, Protocol

from storage.app_settings import all_settings, get_setting, set_setting

from services.progress import DEFAULT_QUESTION_COUNT, parse_question_budget

QUESTION_COUNT = "question_count"
INTERVIEW_TITLE = "interview_title"

DEFAULTS: Dict[str, str] = {
    QUESTION_COUNT: str(DEFAULT_QUESTION_COUNT),
    INTERVIEW_TITLE: "Student Profile Assistant",
}


class SettingsProvider(Protocol):
    def get(self, key: str) -> Optional[str]: ...


class InterviewSettings:
    """Settings provider backed by the ``app_settings`` table."""

    def get(self, key: str) -> Optional[str]:
        value = get_setting(key)
        if value is None:
            return DEFAULTS.get(key)
        return value

    def set(self, key: str, value: str) -> None:
        set_setting(key, str(value))

    def all(self) -> Dict[str, str]:
        merged = dict(DEFAULTS)
        merged.update(all_settings())
        return merged


def question_budget(provider: SettingsProvider) -> int:
    return parse_question_budget(provider.get(QUESTION_COUNT))


def interview_title(provider: SettingsProvider) -> str:
    return provider.get(INTERVIEW_TITLE) or DEFAULTS[INTERVIEW_TITLE]


__all__ = [
    "DEFAULTS",
    "INTERVIEW_TITLE",
    "QUESTION_COUNT",
    "InterviewSettings",
    "SettingsProvider",
    "interview_title",
    "question_budget",
]
