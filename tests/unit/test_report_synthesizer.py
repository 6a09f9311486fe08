import pytest

from config.registry import REPORT_KEY, bind_model
from report_cards import EMPTY_SUMMARY, ReportCard, empty_report_card, parse_report_card, summarize, synthesize
from report_cards.synthesizer import (
    REPORT_OPTIONS,
    build_report_prompt,
    first_json_object,
    parse_or_degrade,
    render_transcript,
)
from services.errors import UpstreamError

TRANSCRIPT = [
    {"role": "assistant", "content": "Hi! What's your name?"},
    {"role": "user", "content": "I'm Aatif"},
    {"role": "assistant", "content": "What do you enjoy studying?"},
    {"role": "user", "content": "Physics, mostly."},
]

FULL_CARD = """Here is the report:
```json
{
  "studentProfile": {"name": "Aatif", "age": 16, "educationLevel": "high school",
                     "institution": null, "favoriteSubjects": ["Physics"], "challengingSubjects": null},
  "personalityInsights": ["Curious"],
  "learningProfile": {"preferredStyle": "visual", "studyPreferences": "alone"},
  "strengths": "Problem solving",
  "growthAreas": [],
  "interests": ["Robotics", null],
  "goals": {"shortTerm": "Win the science fair", "longTerm": null, "careerAspiration": "Engineer"},
  "recommendations": ["Join a robotics club {weekly}"],
  "overallSummary": "Aatif is a curious learner with a bright future."
}
```
Let me know if you need anything else."""


def test_empty_transcript_skips_model(report_model):
    card = synthesize([])
    assert card == empty_report_card()
    assert card.overall_summary == EMPTY_SUMMARY
    assert card.student_profile is None
    assert card.learning_profile is None
    assert card.goals is None
    assert card.strengths == [] and card.recommendations == []
    assert report_model.calls == []


def test_render_transcript_labels_speakers():
    assert render_transcript(TRANSCRIPT).splitlines() == [
        "Interviewer: Hi! What's your name?",
        "Student: I'm Aatif",
        "Interviewer: What do you enjoy studying?",
        "Student: Physics, mostly.",
    ]


def test_prompt_includes_transcript_and_shape():
    prompt = build_report_prompt("Student: hi")
    assert "Conversation:\nStudent: hi" in prompt
    for key in ("studentProfile", "personalityInsights", "learningProfile", "strengths", "growthAreas", "interests", "goals", "recommendations", "overallSummary"):
        assert f'"{key}"' in prompt
    assert prompt.endswith("Respond ONLY with the JSON object, no additional text.")


def test_synthesize_parses_structured_output(report_model):
    report_model.reply = FULL_CARD
    card = synthesize(TRANSCRIPT)

    assert report_model.calls[0]["options"] == REPORT_OPTIONS
    sent = report_model.calls[0]["messages"]
    assert sent[0]["role"] == "system"
    assert "Student: Physics, mostly." in sent[1]["content"]

    assert card.student_profile.name == "Aatif"
    assert card.student_profile.age == "16"
    assert card.student_profile.challenging_subjects == []
    assert card.strengths == ["Problem solving"]
    assert card.interests == ["Robotics"]
    assert card.learning_profile.time_management is None
    assert card.goals.career_aspiration == "Engineer"
    assert card.recommendations == ["Join a robotics club {weekly}"]
    assert card.overall_summary.startswith("Aatif is a curious learner")


def test_malformed_output_degrades_to_raw_summary(report_model):
    report_model.reply = "Sorry, I cannot produce JSON today."
    card = synthesize(TRANSCRIPT)
    assert card.overall_summary == "Sorry, I cannot produce JSON today."
    assert card.student_profile is None
    assert card.strengths == []


@pytest.mark.parametrize(
    "raw",
    [
        '{"studentProfile": "not an object"}',
        '{"overallSummary": "cut off',
        "[1, 2, 3]",
    ],
)
def test_parse_report_card_never_raises(raw):
    card = parse_report_card(raw)
    assert isinstance(card, ReportCard)
    assert card.overall_summary == raw


def test_first_json_object_handles_strings_and_nesting():
    text = 'noise {"a": "brace } inside", "b": {"c": "\\"q\\""}} trailing {"d": 1}'
    assert first_json_object(text) == '{"a": "brace } inside", "b": {"c": "\\"q\\""}}'
    assert first_json_object("no braces here") is None
    assert first_json_object('{ unbalanced {"ok": true}') == '{"ok": true}'


def test_parse_or_degrade_uses_fallback():
    result = parse_or_degrade("x", lambda _: int("nope"), lambda text: f"degraded:{text}")
    assert result == "degraded:x"


def test_transport_failure_raises_upstream():
    def broken(**_):
        raise RuntimeError("502 from provider")

    bind_model(REPORT_KEY, broken)
    with pytest.raises(UpstreamError):
        synthesize(TRANSCRIPT)


def test_summarize_returns_overall_summary(report_model):
    assert summarize(TRANSCRIPT) == "A curious learner."
    assert summarize([]) == EMPTY_SUMMARY


def test_payload_uses_camel_case(report_model):
    payload = synthesize(TRANSCRIPT).to_payload()
    assert set(payload) == {
        "studentProfile",
        "personalityInsights",
        "learningProfile",
        "strengths",
        "growthAreas",
        "interests",
        "goals",
        "recommendations",
        "overallSummary",
    }
