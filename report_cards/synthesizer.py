from __future__ import annotations  # Report card synthesis from interview transcripts

import json
import logging
from textwrap import dedent
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from pydantic import ValidationError

from config.registry import REPORT_KEY, get_model
from llm_gateway import strip_code_fences
from services.errors import UpstreamError

from .models import ReportCard, empty_report_card

logger = logging.getLogger(__name__)

REPORT_OPTIONS = {"max_tokens": 1500, "temperature": 0.5}
NO_SUMMARY = "No summary available."

SYSTEM_PROMPT = (
    "You are an expert educational counselor who creates insightful student profiles. "
    "Always respond with valid JSON only."
)

T = TypeVar("T")


def _role_of(message: Any) -> str:
    return message["role"] if isinstance(message, dict) else message.role


def _content_of(message: Any) -> str:
    return message["content"] if isinstance(message, dict) else message.content


def render_transcript(messages: Iterable[Any]) -> str:  # Render "Student:/Interviewer:" lines
    lines: List[str] = []
    for message in messages:
        speaker = "Student" if _role_of(message) == "user" else "Interviewer"
        lines.append(f"{speaker}: {_content_of(message)}")
    return "\n".join(lines)


def build_report_prompt(transcript: str) -> str:  # Build the structured-extraction task
    shape = dedent(
        """
        {
          "studentProfile": {
            "name": "student's name or null",
            "age": "age or null",
            "educationLevel": "high school/undergraduate/graduate/etc or null",
            "institution": "school/college name or null",
            "favoriteSubjects": ["list of favorite subjects"],
            "challengingSubjects": ["subjects they find difficult"]
          },
          "personalityInsights": ["Key personality trait or characteristic observed"],
          "learningProfile": {
            "preferredStyle": "visual/auditory/kinesthetic/reading-writing or mixed",
            "studyPreferences": "how they prefer to study",
            "idealEnvironment": "their ideal study environment",
            "timeManagement": "their approach to time management"
          },
          "strengths": ["Identified strength"],
          "growthAreas": ["Area for improvement"],
          "interests": ["Hobby or interest"],
          "goals": {
            "shortTerm": "their short-term goals",
            "longTerm": "their long-term goals/dreams",
            "careerAspiration": "career goals if mentioned"
          },
          "recommendations": ["Personalized, actionable recommendation"],
          "overallSummary": "A warm, encouraging 2-3 sentence summary highlighting their potential"
        }
        """
    ).strip()
    return "\n\n".join(
        [
            "Analyze the following student interview conversation and extract a detailed student report card in JSON format.",
            f"Conversation:\n{transcript}",
            "Generate a JSON object with the following structure (use null for any information not found in the conversation):",
            shape,
            dedent(
                """
                Important:
                - Be encouraging and positive in tone
                - Base all insights strictly on what was discussed in the conversation
                - If information wasn't discussed, use null or empty arrays
                - Make recommendations specific and actionable
                Respond ONLY with the JSON object, no additional text.
                """
            ).strip(),
        ]
    )


def first_json_object(text: str) -> Optional[str]:  # Locate the first balanced {...} span
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        # Unbalanced from this brace; try the next one.
        start = text.find("{", start + 1)
    return None


def parse_or_degrade(text: str, parse: Callable[[str], T], degrade: Callable[[str], T]) -> T:  # Structured parse with fallback
    try:
        return parse(text)
    except (ValueError, TypeError, ValidationError) as exc:
        logger.warning("Structured parse failed, degrading: %s", exc)
        return degrade(text)


def _parse_card(raw: str) -> ReportCard:
    cleaned = strip_code_fences(raw)
    span = first_json_object(cleaned)
    data = json.loads(span if span is not None else cleaned)
    if not isinstance(data, dict):
        raise TypeError("Report card payload must be a JSON object")
    return ReportCard.model_validate(data)


def parse_report_card(raw: str) -> ReportCard:  # Model text to ReportCard, never raising on bad shape
    return parse_or_degrade(raw, _parse_card, lambda text: empty_report_card(summary=text))


def synthesize(messages: Iterable[Any]) -> ReportCard:  # Turn a full transcript into a report card
    transcript_messages = list(messages)
    if not transcript_messages:
        return empty_report_card()
    prompt = build_report_prompt(render_transcript(transcript_messages))
    chat = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]
    try:
        model = get_model(REPORT_KEY)
        raw = model(messages=chat, options=dict(REPORT_OPTIONS))
    except Exception as exc:  # noqa: BLE001
        raise UpstreamError(f"Report card completion failed: {exc}") from exc
    return parse_report_card(raw if isinstance(raw, str) else str(raw))


def summarize(messages: Iterable[Any]) -> str:  # Overall summary only
    card = synthesize(messages)
    return card.overall_summary or NO_SUMMARY


__all__ = [
    "build_report_prompt",
    "first_json_object",
    "parse_or_degrade",
    "parse_report_card",
    "render_transcript",
    "summarize",
    "synthesize",
]
