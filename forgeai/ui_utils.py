"""
UI utility functions for consistent component rendering across pages.
"""

import streamlit as st

from forgeai.agent_client import AgentClient
from forgeai.coach import ForgeCoach
from forgeai.config import configure_logging, load_config
from forgeai.history_store import HistoryStore
from forgeai.local_cache import LocalCache


def build_coach(config):
    """
    Wire a ForgeCoach from configuration.

    Args:
        config: Configuration dictionary from load_config()

    Returns:
        ForgeCoach with the cached state rehydrated
    """
    store = HistoryStore(config["database"]["path"])
    store.init_schema()
    agent = AgentClient(
        base_url=config["agent"]["base_url"],
        timeout=config["agent"].get("timeout", 120),
    )
    return ForgeCoach(agent, store, cache=LocalCache(config["cache"]["path"]))


def get_coach():
    """Return the session's ForgeCoach, creating it on first use."""
    if "coach" not in st.session_state:
        config = load_config()
        configure_logging(config["logging"]["level"])
        st.session_state.coach = build_coach(config)
    return st.session_state.coach


def render_page_header(title, subtitle=None, title_icon=""):
    """
    Render standardized page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle text
        title_icon: Optional emoji/icon before title
    """
    icon_text = f"{title_icon} " if title_icon else ""
    st.markdown(f"## {icon_text}{title}")
    if subtitle:
        st.caption(subtitle)


def empty_state(icon, title, description):
    st.info(f"{icon} **{title}**\n\n{description}")


def nav_to(page_name):
    st.session_state.current_page = page_name
    st.rerun()


def render_result(result):
    """Show an ActionResult as a toast, warning or blocking error."""
    if result.ok:
        st.success(result.message)
    elif result.blocking:
        st.error(f"⚠️ {result.message}")
    else:
        st.warning(result.message)


def render_exercises(heading, exercises):
    """
    Render one section of a workout plan.

    Args:
        heading: Section title (e.g. "Warm-up")
        exercises: List[Exercise]
    """
    st.markdown(f"#### {heading}")
    if not exercises:
        st.caption("Nothing prescribed.")
        return

    for exercise in exercises:
        prescription = " · ".join(
            part for part in [
                f"{exercise.sets} sets" if exercise.sets else "",
                f"{exercise.reps} reps" if exercise.reps else "",
                exercise.duration or "",
            ] if part
        )
        line = f"**{exercise.name}**"
        if prescription:
            line += f" — {prescription}"
        st.markdown(line)
        if exercise.notes:
            st.caption(exercise.notes)


THEME_CSS = {
    "light": """
        .stApp { background-color: #f7f7f9; color: #111827; }
        section[data-testid="stSidebar"] { background-color: #ffffff; }
    """,
    "dark": """
        .stApp { background-color: #0b0f19; color: #e5e7eb; }
        section[data-testid="stSidebar"] { background-color: #111827; }
    """,
}


def apply_theme(theme):
    """Inject the stylesheet for the cached light/dark theme flag."""
    css = THEME_CSS.get(theme, THEME_CSS["dark"])
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
