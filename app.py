#!/usr/bin/env python3
"""
ForgeAI - Streamlit Web Interface
Main entry point for the web application.
"""

import importlib
import os
import sys

import streamlit as st

# Ensure pages directory is in Python path
sys.path.insert(0, os.path.dirname(__file__))

# Only reload modules in development mode (set DEV_MODE=1 in environment)
DEV_MODE = os.environ.get('DEV_MODE', '0') == '1'

try:
    import pages

    dashboard = importlib.import_module('pages.dashboard')
    onboarding = importlib.import_module('pages.onboarding')
    workout = importlib.import_module('pages.workout')
    history = importlib.import_module('pages.history')

    if DEV_MODE:
        importlib.reload(dashboard)
        importlib.reload(onboarding)
        importlib.reload(workout)
        importlib.reload(history)
except ImportError as e:
    st.error(f"Critical error loading pages: {e}")
    st.code(f"Python path: {sys.path}")
    st.stop()

from forgeai.ui_utils import apply_theme, get_coach

st.set_page_config(
    page_title="ForgeAI Coach",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded"
)

PAGES = {
    'dashboard': dashboard,
    'onboarding': onboarding,
    'workout': workout,
    'history': history,
}

coach = get_coach()
apply_theme(coach.theme())

if 'current_page' not in st.session_state:
    st.session_state.current_page = 'dashboard'


def render_sign_in():
    """Identity gate; working state is reconciled on every sign-in."""
    st.markdown("# 🧠 ForgeAI")
    st.caption("Your autonomous training agent")
    with st.form("sign_in"):
        user_id = st.text_input("User ID", placeholder="you@example.com")
        submitted = st.form_submit_button("Sign in", type="primary")
    if submitted and user_id.strip():
        coach.sign_in(user_id.strip())
        st.session_state.current_page = 'dashboard'
        st.rerun()


if not coach.user_id:
    # Cached state stays as is until sign-in reconciles it with the identity
    render_sign_in()
    st.stop()

with st.sidebar:
    st.markdown("# 🧠 ForgeAI")
    st.caption(f"Signed in as **{coach.user_id}**")
    st.markdown("---")

    for key, label in [('dashboard', "📊 Dashboard"), ('workout', "🏋️ Workout"), ('history', "📜 History")]:
        if st.button(label, width="stretch", key=f"nav_{key}",
                     type="primary" if st.session_state.current_page == key else "secondary"):
            st.session_state.current_page = key
            st.rerun()

    st.markdown("---")
    theme = coach.theme()
    if st.button("☀️ Light mode" if theme == 'dark' else "🌙 Dark mode", width="stretch"):
        coach.toggle_theme()
        st.rerun()

    if st.button("✏️ Edit profile", width="stretch", key="nav_onboarding",
                 type="primary" if st.session_state.current_page == 'onboarding' else "secondary"):
        st.session_state.current_page = 'onboarding'
        st.rerun()

    if st.button("Sign out", width="stretch"):
        coach.sign_out()
        st.rerun()

if coach.needs_onboarding():
    onboarding.show()
else:
    PAGES.get(st.session_state.current_page, dashboard).show()
