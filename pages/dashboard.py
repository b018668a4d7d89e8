"""
Dashboard page - agent status, weight tracking and next-session requests.
"""

from datetime import date

import pandas as pd
import streamlit as st

from forgeai.analytics import WorkoutAnalytics
from forgeai.ui_utils import get_coach, nav_to, render_page_header, render_result


def should_request_workout(clicked, in_progress, has_profile=True):
    """Return True when a plan request should be started."""
    return bool(clicked and not in_progress and has_profile)


def show():
    """Render the dashboard page"""
    coach = get_coach()
    state = coach.state
    analytics = WorkoutAnalytics(state)

    render_page_header("System Overview", f"Phase: {state.global_phase}", "🧠")

    c1, c2, c3 = st.columns(3)
    c1.metric("Consistency", f"{state.global_consistency}%")
    c2.metric("Fatigue", state.global_fatigue.title())
    c3.metric("Sessions", len(state.history))

    st.markdown("---")

    # ── Weight ──────────────────────────────────────────────────
    unit = state.profile.unit if state.profile else "kg"
    w1, w2 = st.columns([2, 1])
    with w1:
        st.markdown("### ⚖️ Weight")
        st.progress(int(analytics.weight_progress()))
        st.caption(
            f"Current {state.current_weight:g}{unit} · "
            f"Δ {analytics.weight_delta():+.1f}{unit} · "
            f"{analytics.remaining_to_goal():.1f}{unit} to goal"
        )
    with w2:
        new_weight = st.number_input("New weight", value=float(state.current_weight), step=0.1)
        if st.button("Save weight", width="stretch"):
            render_result(coach.update_weight(new_weight))

    # ── Difficulty trend ────────────────────────────────────────
    st.markdown("### 📈 Difficulty Trend")
    trend = pd.DataFrame(analytics.difficulty_trend()).set_index("name")
    st.line_chart(trend)

    today_sessions = analytics.sessions_on(date.today())
    if today_sessions:
        st.caption(f"Logged today: {', '.join(entry.workout.title for entry in today_sessions)}")

    st.markdown("---")

    # ── Next session ────────────────────────────────────────────
    st.markdown("### 🚀 Next Session")
    if state.current_workout:
        st.info(f"Active session: **{state.current_workout.title}**")
        if st.button("Open Workout", type="primary"):
            nav_to("workout")

    custom_request = st.text_input(
        "Anything specific for today? (optional)",
        placeholder="e.g. 30 minutes, no jumping, upper body only",
        key="custom_request",
    )

    if "plan_request_in_progress" not in st.session_state:
        st.session_state.plan_request_in_progress = False

    clicked = st.button(
        "Request Next Workout",
        type="primary",
        disabled=st.session_state.plan_request_in_progress,
    )
    if should_request_workout(clicked, st.session_state.plan_request_in_progress, state.profile is not None):
        st.session_state.plan_request_in_progress = True
        try:
            with st.spinner("🤖 The agent is deciding your next session..."):
                result = coach.request_next_workout(custom_request or None)
        finally:
            st.session_state.plan_request_in_progress = False
        if result.ok:
            nav_to("workout")
        render_result(result)
