"""
Parse raw agent text into a canonical WorkoutPlan.

The agent is asked for raw JSON but regularly wraps it in markdown fences,
adds commentary around it, or renames fields between calls. Parsing is
split into a text cleanup step, a JSON decode step that reports failure
as a tagged result, and a defaulting step that is total over the
WorkoutPlan shape.
"""

import json
import re
from dataclasses import dataclass

from forgeai.exercise_normalizer import normalize_exercises
from forgeai.models import AGENT_FOCUS_VALUES, FATIGUE_LEVELS, WorkoutPlan

DEFAULT_TITLE = "Agent Workout"
DEFAULT_REASONING = "Optimized session generated by ForgeAI."
DEFAULT_ALTERNATIVES = "None provided."
DEFAULT_METRICS = "RPE and completion."
DEFAULT_PHASE = "General Physical Preparedness"
DEFAULT_FATIGUE = "medium"
DEFAULT_CONSISTENCY = 0
DEFAULT_AGENT_FOCUS = "Executing"

# Accepted source keys per field, in priority order
MAIN_EXERCISE_KEYS = ("mainExercises", "mainBlock", "main")
REASONING_KEYS = ("reasoning", "rationale")

CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass(frozen=True)
class Parsed:
    plan: WorkoutPlan


@dataclass(frozen=True)
class NeedsFallback:
    error: Exception


@dataclass(frozen=True)
class Failed:
    error: Exception


ParseResult = Parsed | NeedsFallback | Failed


def strip_code_fences(text):
    """Remove markdown code fence markers anywhere in the text."""
    return CODE_FENCE_RE.sub("", text or "").strip()


def slice_json_object(text):
    """Cut text down to the span between the first '{' and the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def _first_of(parsed, keys, default):
    for key in keys:
        value = parsed.get(key)
        if value:
            return value
    return default


def _text(parsed, key, default):
    value = parsed.get(key)
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def _fatigue_level(value):
    if isinstance(value, str) and value.strip().lower() in FATIGUE_LEVELS:
        return value.strip().lower()
    return DEFAULT_FATIGUE


def _agent_focus(value):
    if isinstance(value, str):
        for focus in AGENT_FOCUS_VALUES:
            if value.strip().lower() == focus.lower():
                return focus
    return DEFAULT_AGENT_FOCUS


def _consistency_score(value):
    if isinstance(value, bool):
        return DEFAULT_CONSISTENCY
    try:
        score = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONSISTENCY
    if score != score:
        return DEFAULT_CONSISTENCY
    score = max(0, min(100, score))
    return int(score) if float(score).is_integer() else score


def build_workout_plan(parsed):
    """
    Build a canonical WorkoutPlan from a decoded JSON object.

    Every field falls back to its documented default, so this never raises
    for any dict input, however sparse.

    Args:
        parsed: Decoded JSON object from the agent

    Returns:
        WorkoutPlan
    """
    if not isinstance(parsed, dict):
        parsed = {}

    return WorkoutPlan(
        title=_text(parsed, "title", DEFAULT_TITLE),
        warmup=normalize_exercises(parsed.get("warmup") or []),
        main_exercises=normalize_exercises(_first_of(parsed, MAIN_EXERCISE_KEYS, [])),
        cooldown=normalize_exercises(parsed.get("cooldown") or []),
        reasoning=str(_first_of(parsed, REASONING_KEYS, DEFAULT_REASONING)),
        alternatives=_text(parsed, "alternatives", DEFAULT_ALTERNATIVES),
        metrics_to_track=_text(parsed, "metricsToTrack", DEFAULT_METRICS),
        phase=_text(parsed, "phase", DEFAULT_PHASE),
        fatigue_level=_fatigue_level(parsed.get("fatigueLevel")),
        consistency_score=_consistency_score(parsed.get("consistencyScore")),
        agent_focus=_agent_focus(parsed.get("agentFocus")),
    )


def decode_plan_object(text):
    """
    Clean agent text and decode the JSON object inside it.

    Raises:
        json.JSONDecodeError: If the cleaned text is not valid JSON
        ValueError: If the JSON value is not an object
        RecursionError: If the JSON nests too deeply to decode
    """
    cleaned = slice_json_object(strip_code_fences(text))
    parsed = json.loads(cleaned)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def parse_workout_text(text, final=False):
    """
    Try to turn raw agent text into a WorkoutPlan.

    Args:
        text: Raw agent reply
        final: True when no further fallback exists; failures are then
            reported as Failed instead of NeedsFallback

    Returns:
        Parsed, NeedsFallback or Failed
    """
    try:
        parsed = decode_plan_object(text)
    except (ValueError, RecursionError) as exc:
        return Failed(exc) if final else NeedsFallback(exc)
    return Parsed(build_workout_plan(parsed))
