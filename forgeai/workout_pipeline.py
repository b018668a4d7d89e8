"""
Two-tier workout extraction: local parse, then one remote re-extraction.
"""

from loguru import logger

from forgeai.errors import AgentTransportError, PlanParseError
from forgeai.plan_parser import Parsed, parse_workout_text

TARGET_SCHEMA = """{
  "title": "workout title",
  "warmup": [],
  "mainExercises": [],
  "cooldown": [],
  "reasoning": "why this workout",
  "alternatives": "alternative options",
  "metricsToTrack": "what to track",
  "phase": "current phase",
  "fatigueLevel": "low",
  "consistencyScore": 0,
  "agentFocus": "Planning"
}"""


def build_extraction_prompt(text):
    """Prompt asking the agent to re-emit its reply as strict JSON."""
    return f"""Extract the workout details from this response into a valid JSON object with this exact structure:
{TARGET_SCHEMA}

Response to parse:
{text}

Return ONLY the raw JSON object, no markdown formatting."""


def get_structured_workout(text, agent):
    """
    Turn raw agent text into a canonical WorkoutPlan.

    Tries a local parse first. Only when the text is not JSON-recoverable is
    it sent back to the agent once for re-extraction; there is no third try.

    Args:
        text: Raw agent reply
        agent: Object exposing send_prompt(prompt) -> str (e.g. AgentClient)

    Returns:
        WorkoutPlan

    Raises:
        PlanParseError: If both the local parse and the re-extraction fail
    """
    logger.debug("Attempting local parse of workout text")
    result = parse_workout_text(text)
    if isinstance(result, Parsed):
        logger.info("Local parse successful")
        return result.plan

    original_error = result.error
    logger.warning(f"Local parse failed, falling back to agent re-extraction: {original_error}")

    try:
        extracted = agent.send_prompt(build_extraction_prompt(text))
    except AgentTransportError as exc:
        raise _parse_failure(text, original_error, exc) from exc

    fallback = parse_workout_text(extracted, final=True)
    if not isinstance(fallback, Parsed):
        raise _parse_failure(text, original_error, fallback.error) from fallback.error

    logger.info(f"Parsed workout via agent re-extraction: {fallback.plan.title}")
    return fallback.plan


def _parse_failure(text, original_error, fallback_error):
    logger.error(f"Parsing error: {fallback_error}")
    logger.debug(f"Original text: {text}")
    return PlanParseError(
        f"Failed to parse workout: {fallback_error} (local parse: {original_error})",
        original_error=original_error,
        fallback_error=fallback_error,
        raw_text=text,
    )
