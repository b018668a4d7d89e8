"""
Workout page - the current session and the form to close it.
"""

import streamlit as st

from forgeai.ui_utils import empty_state, get_coach, nav_to, render_exercises, render_page_header, render_result

STATUS_LABELS = {
    "completed": "✅ Completed",
    "partial": "🟡 Partial",
    "skipped": "⏭️ Skipped",
}


def show():
    """Render the current workout page"""
    coach = get_coach()
    plan = coach.state.current_workout

    if plan is None:
        empty_state("🏋️", "No Active Session", "Request your next workout from the dashboard.")
        if st.button("Back to Dashboard"):
            nav_to("dashboard")
        return

    render_page_header(plan.title, f"{plan.phase} · focus: {plan.agent_focus} · fatigue: {plan.fatigue_level}", "🏋️")

    with st.expander("Why this session", expanded=True):
        st.write(plan.reasoning)

    render_exercises("Warm-up", plan.warmup)
    render_exercises("Main Block", plan.main_exercises)
    render_exercises("Cool-down", plan.cooldown)

    st.markdown("#### Alternatives")
    st.write(plan.alternatives)
    st.markdown("#### What I Will Track Next")
    st.write(plan.metrics_to_track)

    if coach.agent_raw_text:
        with st.expander("Raw agent output"):
            st.code(coach.agent_raw_text)

    st.markdown("---")
    with st.form("finish_workout"):
        status = st.radio(
            "How did it go?",
            list(STATUS_LABELS),
            format_func=STATUS_LABELS.get,
            horizontal=True,
        )
        difficulty = st.slider("Difficulty", min_value=1, max_value=10, value=5)
        feedback = st.text_area("Feedback for the agent")
        submitted = st.form_submit_button("Finish Session", type="primary")

    if submitted:
        result = coach.finish_workout(status, feedback, difficulty)
        if result.ok:
            nav_to("dashboard")
        render_result(result)
