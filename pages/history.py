"""
History page - past sessions with sortable order.
"""

import pandas as pd
import streamlit as st

from forgeai.analytics import WorkoutAnalytics, sort_history
from forgeai.ui_utils import empty_state, get_coach, render_page_header


def history_rows(history):
    """Flatten history entries into table rows."""
    return [
        {
            "Date": entry.date[:10],
            "Workout": entry.workout.title,
            "Status": entry.status,
            "Difficulty": entry.difficulty,
            "Feedback": entry.feedback,
        }
        for entry in history
    ]


def show():
    """Render the session history page"""
    coach = get_coach()
    state = coach.state
    render_page_header("Session History", "Every session you finished or skipped", "📜")

    if not state.history:
        empty_state("📭", "No Sessions Yet", "Finish your first workout to start the log.")
        return

    breakdown = WorkoutAnalytics(state).status_breakdown()
    c1, c2, c3 = st.columns(3)
    c1.metric("Completed", breakdown["completed"])
    c2.metric("Partial", breakdown["partial"])
    c3.metric("Skipped", breakdown["skipped"])

    order = st.radio("Sort", ["latest", "oldest"], horizontal=True)
    st.dataframe(
        pd.DataFrame(history_rows(sort_history(state.history, order))),
        hide_index=True,
        width="stretch",
    )
