"""Opportunistic name extraction from student replies.

Each strategy looks for one self-introduction cue and returns the word that
follows it. Strategies run in order and the first accepted capture wins.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Protocol, Sequence

_WORD = r"([A-Za-z][A-Za-z'\-]*)"


class NameMatcher(Protocol):
    def match(self, text: str) -> Optional[str]: ...


# Words that follow "I'm" / "I am" / "this is" far more often than a name does.
NOT_NAMES = frozenset(
    {
        "a", "an", "the", "not", "so", "very", "really", "just", "also", "still",
        "fine", "good", "great", "ok", "okay", "well", "alright", "sure", "sorry",
        "here", "there", "in", "at", "from", "on", "into", "doing", "going",
        "currently", "studying", "interested", "looking", "trying", "happy",
        "excited", "ready", "new", "done", "back", "glad", "pretty", "quite",
        "it", "me", "my", "your", "that", "this", "what", "about",
        "yes", "no", "yeah", "yep", "nope", "hi", "hello", "hey", "thanks",
        "thank", "please", "maybe", "idk", "nothing", "none", "student",
        "nervous", "tired", "busy", "free", "available", "bored", "confused",
        "i", "i'm", "im", "we", "you", "he", "she", "they", "us", "everyone",
        "everybody", "someone", "somebody", "nobody", "all",
    }
)


@dataclass(frozen=True)
class RegexNameMatcher:
    """Return the first capture of ``pattern`` that is not a denylisted word."""

    label: str
    pattern: Pattern[str]

    def match(self, text: str) -> Optional[str]:
        for found in self.pattern.finditer(text):
            token = found.group(1)
            if token.lower() not in NOT_NAMES:
                return token
        return None


@dataclass(frozen=True)
class BareNameMatcher:
    """Accept a reply that is nothing but a single plausible name."""

    label: str = "bare_reply"
    max_length: int = 20

    def match(self, text: str) -> Optional[str]:
        stripped = text.strip().strip(".!?,;:").strip()
        if not stripped or " " in stripped or len(stripped) > self.max_length:
            return None
        if not re.fullmatch(r"[A-Za-z][A-Za-z'\-]*", stripped):
            return None
        if stripped.lower() in NOT_NAMES:
            return None
        return stripped


def _cue(expr: str) -> Pattern[str]:
    return re.compile(expr, re.IGNORECASE)


CUE_MATCHERS: Sequence[NameMatcher] = (
    RegexNameMatcher("my_name_is", _cue(r"\bmy\s+name(?:\s+is|'s|’s)\s+" + _WORD)),
    RegexNameMatcher("call_me", _cue(r"\bcall\s+me\s+" + _WORD)),
    RegexNameMatcher("i_m", _cue(r"\bi(?:'|’)?m\s+" + _WORD)),
    RegexNameMatcher("i_am", _cue(r"\bi\s+am\s+" + _WORD)),
    RegexNameMatcher("this_is", _cue(r"\bthis\s+is\s+" + _WORD)),
    RegexNameMatcher("x_here", _cue(r"^\s*(?:hi|hello|hey)?[\s,!]*" + _WORD + r"\s+here\b")),
)

# Bare replies are only trusted while the interviewer is still asking for a name.
DEFAULT_MATCHERS: Sequence[NameMatcher] = (*CUE_MATCHERS, BareNameMatcher())


def normalize_name(token: str) -> str:
    return token[:1].upper() + token[1:].lower()


def extract_name(text: Optional[str], matchers: Sequence[NameMatcher] = DEFAULT_MATCHERS) -> Optional[str]:
    """Return a normalized name found in ``text``, or ``None``."""

    if not text:
        return None
    for matcher in matchers:
        token = matcher.match(text)
        if token is None:
            continue
        if len(token) < 2:
            return None
        return normalize_name(token)
    return None


__all__ = ["BareNameMatcher", "CUE_MATCHERS", "DEFAULT_MATCHERS", "NameMatcher", "RegexNameMatcher", "extract_name", "normalize_name"]
