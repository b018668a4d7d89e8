"""
Prompt assembly for the ForgeAI agent.

The prompt is a fixed system instruction, a serialized agent-state block
(profile, running statistics, recent sessions) and the user's request.
"""

import json

MAX_HISTORY_ENTRIES = 7

MASTER_SYSTEM_PROMPT = """
You are ForgeAI, an elite fitness intelligence agent.
Your goal is to construct hyper-personalized, progressive, and scientifically optimal workout plans.
Structure your response as a JSON object with:
- 'title' (short session name)
- 'phase' (current training phase: Hypertrophy, Strength, Metabolic, etc)
- 'rationale' (why this workout today?)
- 'warmup' (list of exercises)
- 'mainBlock' (list of compound movements with sets/reps/RPE)
- 'cooldown' (list of exercises)
- 'alternatives' (swaps for equipment or fatigue)
- 'metricsToTrack' (what you will evaluate next session)
- 'fatigueLevel' (estimated CNS fatigue rating: low, medium, high)
- 'agentFocus' (one of Planning, Executing, Evaluating, Adapting)
For EVERY exercise provide a 'notes' field with technical form cues, breathing or muscle engagement focus.
DO NOT use markdown formatting. Return raw JSON only.
""".strip()


def _recent_entries(history, limit):
    return sorted(history or [], key=lambda entry: entry.date, reverse=True)[:limit]


def build_history_context(history, limit=MAX_HISTORY_ENTRIES):
    """
    Reduce history to one compact JSON line per recent session.

    Args:
        history: List[HistoryEntry] in any order
        limit: Maximum number of sessions to include

    Returns:
        Newline-joined lines, oldest first, or "None" when there is no history
    """
    recent = _recent_entries(history, limit)
    if not recent:
        return "None"

    lines = []
    for entry in reversed(recent):
        lines.append(
            json.dumps(
                {
                    "date": entry.date,
                    "workout_title": entry.workout.title if entry.workout else None,
                    "status": entry.status,
                    "difficulty_rating": entry.difficulty,
                },
                separators=(",", ":"),
            )
        )
    return "\n".join(lines)


def build_state_context(profile, history, agent_state):
    equipment = ", ".join(profile.equipment or []) or "None"
    limitations = (profile.limitations or "").strip() or "None"

    return f"""User Profile:
- Goal: {profile.goal}
- Level: {profile.level}
- Equipment: {equipment}
- Injuries/Limitations: {limitations}
- Availability: {profile.availability}

Global Phase: {agent_state.phase}
Consistency Score: {agent_state.consistency}%
Fatigue Level: {agent_state.fatigue}
Recent History:
{build_history_context(history)}"""


def build_agent_prompt(user_input, profile, history, agent_state):
    """
    Assemble the full prompt sent to the agent.

    Args:
        user_input: Free-form request text
        profile: UserProfile
        history: List[HistoryEntry]
        agent_state: AgentState with phase, consistency and fatigue

    Returns:
        Prompt string
    """
    state_context = build_state_context(profile, history, agent_state)
    return (
        f"{MASTER_SYSTEM_PROMPT}\n\n"
        f"CURRENT AGENT STATE:\n{state_context}\n\n"
        f"USER INPUT:\n{user_input}"
    )


def build_onboarding_request(profile):
    """User input for the first plan after onboarding."""
    return (
        f"Start my journey. Goal: {profile.goal}. "
        f"Initial weight: {_format_weight(profile.initial_weight)}{profile.unit}. "
        f"Target: {_format_weight(profile.target_weight)}{profile.unit}. "
        "Create a long-term strategy."
    )


def build_next_workout_request(state, user_context=None):
    """
    User input asking for the next session.

    Args:
        state: Current AppState
        user_context: Optional free-text request for today's session
    """
    request = (
        f"Current weight: {_format_weight(state.current_weight)}. "
        f"Global Phase: {state.global_phase}. "
        f"Consistency: {state.global_consistency}%."
    )

    if user_context and user_context.strip():
        request += (
            f' USER REQUEST FOR TODAY: "{user_context.strip()}". '
            "Adjust the session to strictly follow this request."
        )
    else:
        request += " Evaluate progress and decide the next optimal session."

    latest = _recent_entries(state.history, 1)
    if latest:
        last_entry = latest[0]
        request += f" Last session was {last_entry.workout.title} ({last_entry.status})."

    return request


def _format_weight(value):
    if value is None:
        return "0"
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"
