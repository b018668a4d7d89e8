"""
Exercise shape normalization.

The agent is not schema-stable: an exercise list can hold plain strings,
flat objects, or "block" objects that group several movements under one
heading. Every item is classified into one of four shapes and converted
by the matching rule into flat, canonical Exercise records.

Normalization never raises. Malformed exercise data degrades into a
best-effort record instead of aborting plan construction.
"""

import re

from forgeai.models import Exercise

STRING_FORM = "string"
BLOCK_FORM = "block"
NAMED_FORM = "named"
OPAQUE_FORM = "opaque"

DEFAULT_BLOCK_SETS = "3"
DEFAULT_BLOCK_REPS = "10"
# Blocks nested deeper than this are treated as opaque items
MAX_BLOCK_DEPTH = 16
STRING_FORM_NOTES = "Complete as described"
UNNAMED_EXERCISE = "Exercise"

DIGITS_RE = re.compile(r"\d+")

# Keys that carry a usable name on objects that are otherwise unrecognized
OPAQUE_NAME_KEYS = ("exercise", "Exercise", "title", "label")


def _first(mapping, *keys):
    """Return the first truthy value among keys, else None."""
    for key in keys:
        value = mapping.get(key)
        if value:
            return value
    return None


def _as_text(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    return str(value)


def classify_exercise(value):
    """
    Classify an exercise-like value into one of the known shapes.

    Args:
        value: Anything the agent put into an exercise list

    Returns:
        One of STRING_FORM, BLOCK_FORM, NAMED_FORM, OPAQUE_FORM
    """
    if isinstance(value, str):
        return STRING_FORM
    if isinstance(value, dict):
        if _first(value, "Block", "block"):
            return BLOCK_FORM
        if _first(value, "name", "movement"):
            return NAMED_FORM
    return OPAQUE_FORM


def _normalize_string(value):
    name = value.strip()
    if not name:
        return []

    duration = None
    if "minute" in name.lower():
        digits = DIGITS_RE.search(name)
        if digits:
            duration = f"{digits.group(0)} min"

    return [Exercise(name=name, duration=duration, notes=STRING_FORM_NOTES)]


def _normalize_block(value, depth=0):
    heading = _text_or_none(_first(value, "Block", "block"))
    movements = _first(value, "Movements", "movements") or []
    if not isinstance(movements, (list, tuple)):
        return []

    sets = _as_text(value.get("sets")) or DEFAULT_BLOCK_SETS
    reps = _as_text(value.get("reps")) or DEFAULT_BLOCK_REPS
    notes = _as_text(_first(value, "Details", "details")) or heading

    exploded = []
    for movement in movements:
        if isinstance(movement, str):
            if not movement.strip():
                continue
            exploded.append(Exercise(name=movement.strip(), sets=sets, reps=reps, notes=notes))
        else:
            # Object-shaped movements keep their own fields
            exploded.extend(normalize_exercise(movement, depth + 1))
    return exploded


def _text_or_none(value):
    text = _as_text(value)
    return text.strip() if text and text.strip() else None


def _normalize_named(value):
    name = _text_or_none(_first(value, "name", "movement")) or UNNAMED_EXERCISE

    notes = _as_text(value.get("notes"))
    if notes is None:
        rpe = _first(value, "RPE", "rpe")
        if rpe is not None:
            notes = f"RPE: {rpe}"

    return [
        Exercise(
            name=name,
            sets=_as_text(value.get("sets")),
            reps=_as_text(value.get("reps")),
            duration=_as_text(value.get("duration")),
            notes=notes,
        )
    ]


def _normalize_opaque(value):
    if isinstance(value, Exercise):
        return [value]

    if isinstance(value, dict):
        name = _text_or_none(_first(value, *OPAQUE_NAME_KEYS)) or UNNAMED_EXERCISE
        return [
            Exercise(
                name=name,
                sets=_as_text(value.get("sets")),
                reps=_as_text(value.get("reps")),
                duration=_as_text(value.get("duration")),
                notes=_as_text(_first(value, "notes", "instructions")),
            )
        ]

    if value is None or isinstance(value, (list, tuple)):
        name = UNNAMED_EXERCISE
    else:
        name = _text_or_none(value) or UNNAMED_EXERCISE
    return [Exercise(name=name)]


_RULES = {
    STRING_FORM: _normalize_string,
    BLOCK_FORM: _normalize_block,
    NAMED_FORM: _normalize_named,
    OPAQUE_FORM: _normalize_opaque,
}


def normalize_exercise(value, depth=0):
    """
    Normalize one exercise-like value into zero or more Exercise records.

    Args:
        value: Anything the agent put into an exercise list
        depth: Block nesting level of value; past MAX_BLOCK_DEPTH a block
            is normalized as an opaque item instead of being expanded
    """
    form = classify_exercise(value)
    if form == BLOCK_FORM:
        if depth >= MAX_BLOCK_DEPTH:
            return _normalize_opaque(value)
        return _normalize_block(value, depth)
    return _RULES[form](value)


def normalize_exercises(exercises):
    """
    Normalize a list of exercise-like values into a flat list of Exercise records.

    Order is preserved; a block item expands in place into its movements.
    A value that is not a list yields an empty list.

    Args:
        exercises: Raw exercise list as emitted by the agent

    Returns:
        List[Exercise], each with a non-empty name
    """
    if not isinstance(exercises, (list, tuple)):
        return []

    normalized = []
    for item in exercises:
        normalized.extend(normalize_exercise(item))
    return normalized
