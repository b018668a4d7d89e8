"""
Analytics over the working state for the dashboard and history views.
"""

from collections import Counter
from datetime import datetime, timezone

from forgeai.models import HISTORY_STATUSES

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _safe_date(value):
    try:
        parsed = datetime.fromisoformat((value or "").replace("Z", "+00:00"))
    except ValueError:
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_history(history, order="latest"):
    """
    Return history sorted for display.

    Args:
        history: List[HistoryEntry]
        order: "latest" (newest first) or "oldest"

    Returns:
        New sorted list; unparseable dates sort as the epoch
    """
    return sorted(
        history or [],
        key=lambda entry: _safe_date(entry.date),
        reverse=(order == "latest"),
    )


class WorkoutAnalytics:
    """Dashboard statistics derived from an AppState."""

    def __init__(self, state):
        """
        Args:
            state: AppState to analyze
        """
        self.state = state

    def difficulty_trend(self, sessions=10):
        """
        Difficulty of the most recent sessions, oldest first.

        Returns:
            List of {"name": "S<n>", "val": difficulty}
        """
        history = sort_history(self.state.history, order="latest")
        if not history:
            return [{"name": "S0", "val": 0}]

        recent = list(reversed(history[:sessions]))
        return [
            {"name": f"S{i + 1}", "val": entry.difficulty}
            for i, entry in enumerate(recent)
        ]

    def sessions_on(self, day):
        """History entries whose date falls on day (a date or 'YYYY-MM-DD' string)."""
        prefix = day if isinstance(day, str) else day.isoformat()
        return [entry for entry in self.state.history if entry.date.startswith(prefix)]

    def weight_progress(self):
        """Percent of the way from initial to target weight, clamped to [0, 100]."""
        profile = self.state.profile
        if not profile:
            return 0
        span = profile.target_weight - profile.initial_weight
        if span == 0:
            return 0
        progress = (self.state.current_weight - profile.initial_weight) / span * 100
        return max(0, min(100, progress))

    def weight_delta(self):
        profile = self.state.profile
        if not profile:
            return 0.0
        return round(self.state.current_weight - profile.initial_weight, 1)

    def remaining_to_goal(self):
        profile = self.state.profile
        if not profile:
            return 0.0
        return round(profile.target_weight - self.state.current_weight, 1)

    def status_breakdown(self):
        """Count of sessions per status, with every status present."""
        counts = Counter(entry.status for entry in self.state.history)
        return {status: counts.get(status, 0) for status in HISTORY_STATUSES}
