"""Keyword heuristics over coaching-model responses.

These helpers read a model reply and pull out coarse labels for the
dashboard: which challenges the reply talks about, which approaches it
suggests, a rough 0-100 confidence estimate, and an exercise title.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List

DEFAULT_TITLE = "Confidence Building Exercise"
DEFAULT_SKILL = "General Confidence"
EXERCISE_DURATION = "5-10 minutes"

CHALLENGE_CUES = (
    ("public speaking", "Public Speaking"),
    ("social anxiety", "Social Anxiety"),
    ("presentation", "Presentations"),
    ("interview", "Interviews"),
)

SUGGESTION_CUES = (
    ("breathing", "Breathing Exercises"),
    ("practice", "Practice Routines"),
    ("visualiz", "Visualization"),
    ("prepar", "Preparation Strategies"),
)

NEGATIVE_PHRASES = ("very anxious", "terrified", "extremely nervous", "panic")
MODERATE_PHRASES = ("somewhat nervous", "uncomfortable", "worried")
POSITIVE_PHRASES = ("some confidence", "getting better", "improving")

SKILL_MAP = {
    "Public Speaking": "Voice Projection",
    "Social Anxiety": "Anxiety Management",
    "Presentations": "Body Language",
    "Interviews": "Content Organization",
}

_HEADING_MARKER_RE = re.compile(r"^#+ ")


@dataclass
class ResponseAnalysis:
    main_challenges: List[str] = field(default_factory=list)
    suggested_approaches: List[str] = field(default_factory=list)
    confidence_score: int = 50
    exercise_title: str = DEFAULT_TITLE
    target_skill: str = DEFAULT_SKILL


@dataclass
class Exercise:
    title: str
    instructions: str
    duration: str = EXERCISE_DURATION
    target_skill: str = DEFAULT_SKILL


def extract_challenges(text: str) -> List[str]:
    lowered = (text or "").lower()
    found = [label for cue, label in CHALLENGE_CUES if cue in lowered]
    return found or [DEFAULT_SKILL]


def extract_suggestions(text: str) -> List[str]:
    lowered = (text or "").lower()
    found = [label for cue, label in SUGGESTION_CUES if cue in lowered]
    return found or ["Personalized Coaching"]


def estimate_confidence_score(text: str) -> int:
    """Start at 50 and shift per matched phrase; clamped to 0..100."""
    lowered = (text or "").lower()
    score = 50
    score -= 10 * sum(1 for phrase in NEGATIVE_PHRASES if phrase in lowered)
    score -= 5 * sum(1 for phrase in MODERATE_PHRASES if phrase in lowered)
    score += 10 * sum(1 for phrase in POSITIVE_PHRASES if phrase in lowered)
    return max(0, min(100, score))


def extract_exercise_title(text: str) -> str:
    for line in (text or "").split("\n"):
        if line.strip():
            return _HEADING_MARKER_RE.sub("", line).strip()
    return DEFAULT_TITLE


def determine_target_skill(challenges: Iterable[str]) -> str:
    for challenge in challenges:
        if challenge in SKILL_MAP:
            return SKILL_MAP[challenge]
    return DEFAULT_SKILL


def analyze_response(text: str) -> ResponseAnalysis:
    challenges = extract_challenges(text)
    return ResponseAnalysis(
        main_challenges=challenges,
        suggested_approaches=extract_suggestions(text),
        confidence_score=estimate_confidence_score(text),
        exercise_title=extract_exercise_title(text),
        target_skill=determine_target_skill(challenges),
    )


def build_exercise(text: str, challenge_areas: Iterable[str]) -> Exercise:
    """Package a model-written exercise with its title and target skill."""
    return Exercise(
        title=extract_exercise_title(text),
        instructions=text or "",
        target_skill=determine_target_skill(challenge_areas),
    )
