"""Interviewer prompt composition and chat reply generation."""
from __future__ import annotations

from textwrap import dedent
from typing import Any, Dict, Iterable, List, Mapping

from config.registry import CHAT_KEY, get_model
from services.errors import UpstreamError
from services.progress import Phase, Progress, compute_progress

CHAT_OPTIONS: Dict[str, Any] = {"max_tokens": 500, "temperature": 0.7}

INTERVIEW_PHASES = dedent(
    """
    ## Your Interview Flow:

    ### Phase 1: Basic Information (first few exchanges)
    - Start by asking their name (if not already known)
    - Ask about their age
    - Ask about their current education level (high school, undergraduate, graduate, etc.)
    - Ask about their school, college or university

    ### Phase 2: Academic Profile
    - Ask about their favorite subjects and why
    - Ask about subjects they find challenging
    - Ask about their academic goals or dream career

    ### Phase 3: Personality & Interests
    - Ask about their hobbies and interests outside academics
    - Ask what they do for fun or relaxation
    - Ask about extracurricular activities, clubs or sports
    - Ask about their strengths and areas they'd like to improve

    ### Phase 4: Learning Style
    - Ask how they prefer to study (alone, in groups, with music, etc.)
    - Ask about their ideal learning environment
    - Ask if they prefer reading, videos, hands-on activities or discussions
    - Ask about their time management and study habits

    ### Phase 5: Goals & Aspirations
    - Ask about their short-term goals (this year)
    - Ask about their long-term goals or dreams
    - Ask what motivates them
    """
).strip()

GUIDELINES = dedent(
    """
    ## Guidelines:
    1. Ask ONE question at a time - never several in one message
    2. Be warm, encouraging, and show genuine interest in their responses
    3. Use their name once you know it
    4. Acknowledge their answer before moving to the next question
    5. If they give brief answers, gently probe for more detail
    6. Prioritize the most important topics based on the remaining question count
    7. Be supportive and positive about their goals and interests

    Remember: this is a friendly conversation, not an interrogation.
    """
).strip()


def _progress_block(progress: Progress) -> str:
    if progress.phase is Phase.CONCLUDE:
        return dedent(
            f"""
            ## IMPORTANT: CONCLUDE THE INTERVIEW NOW
            You have asked all {progress.total} questions. In your next response:
            1. Thank the student warmly for their time and answers
            2. Let them know their Student Report Card is now ready
            3. Encourage them to open the Report Card to view their personalized profile
            4. Wish them well in their educational journey
            DO NOT ask any more questions.
            """
        ).strip()
    if progress.phase is Phase.NEAR_END:
        return dedent(
            f"""
            ## NOTE: The interview is almost complete
            You have {progress.remaining} question(s) remaining out of {progress.total}.
            Start wrapping up by asking your final questions about goals or any remaining important topics.
            """
        ).strip()
    return dedent(
        f"""
        ## Progress: {progress.current}/{progress.total} questions asked
        You have {progress.remaining} questions remaining. Continue the interview naturally.
        """
    ).strip()


def compose_instructions(question_budget: int, current_question_number: int) -> str:
    """Build the system instructions for the turn being answered."""

    progress = compute_progress(question_budget, current_question_number)
    header = dedent(
        f"""
        You are a friendly and professional Student Profile Assistant. Your goal is to conduct a
        conversational interview to learn about the student and create their personalized profile.

        ## Interview Configuration
        - Total questions to ask: {progress.total}
        - Questions asked so far: {progress.current}
        - Questions remaining: {progress.remaining}
        """
    ).strip()
    return "\n\n".join([header, _progress_block(progress), INTERVIEW_PHASES, GUIDELINES])


def compose_turn_context(
    instructions: str,
    history: Iterable[Any],
    new_user_message: str,
) -> List[Dict[str, str]]:
    """System instructions, then history oldest-first, then the new message.

    History entries may be mappings or objects with ``role``/``content``.
    """

    messages: List[Dict[str, str]] = [{"role": "system", "content": instructions}]
    for entry in history:
        if isinstance(entry, Mapping):
            role, content = entry["role"], entry["content"]
        else:
            role, content = entry.role, entry.content
        messages.append({"role": str(role), "content": str(content)})
    messages.append({"role": "user", "content": new_user_message})
    return messages


def generate_reply(messages: List[Dict[str, str]]) -> str:
    """Invoke the bound chat model; any failure becomes :class:`UpstreamError`."""

    try:
        model = get_model(CHAT_KEY)
        reply = model(messages=messages, options=dict(CHAT_OPTIONS))
    except Exception as exc:  # noqa: BLE001
        raise UpstreamError(f"Chat completion failed: {exc}") from exc
    if not isinstance(reply, str) or not reply.strip():
        raise UpstreamError("Chat completion returned no text")
    return reply


__all__ = [
    "CHAT_OPTIONS",
    "compose_instructions",
    "compose_turn_context",
    "generate_reply",
]
