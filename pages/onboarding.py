"""
Onboarding page - collect or edit the profile and generate a plan from it.
"""

import streamlit as st

from forgeai.models import UserProfile
from forgeai.ui_utils import get_coach, nav_to, render_page_header, render_result

LEVELS = ["beginner", "intermediate", "advanced"]
UNITS = ["kg", "lbs"]
EQUIPMENT_OPTIONS = [
    "Bodyweight",
    "Dumbbells",
    "Barbell",
    "Kettlebells",
    "Resistance Bands",
    "Pull-up Bar",
    "Cable Machine",
    "Full Gym",
]


def parse_equipment(selected, other_text):
    """Merge multiselect choices with a comma-separated free-text list."""
    equipment = list(selected or [])
    for item in (other_text or "").split(","):
        item = item.strip()
        if item and item not in equipment:
            equipment.append(item)
    return equipment


def split_equipment(equipment):
    """Split stored equipment into known multiselect options and free text."""
    selected = [item for item in equipment or [] if item in EQUIPMENT_OPTIONS]
    other = [item for item in equipment or [] if item not in EQUIPMENT_OPTIONS]
    return selected, ", ".join(other)


def show():
    """Render the onboarding page, prefilled when editing an existing profile"""
    coach = get_coach()
    existing = coach.state.profile
    if existing and existing.goal:
        render_page_header("Edit Profile", "Saving re-plans your training from the updated profile", "✏️")
    else:
        render_page_header("Initialize Your Agent", "Tell ForgeAI what you are training for", "🛠️")
    existing = existing or UserProfile()
    selected_default, other_default = split_equipment(existing.equipment)
    if not existing.equipment:
        selected_default = ["Bodyweight"]

    with st.form("onboarding"):
        goal = st.text_input("Primary goal", value=existing.goal, placeholder="e.g. Build strength, lose 5 kg")
        level = st.selectbox(
            "Experience level",
            LEVELS,
            index=LEVELS.index(existing.level) if existing.level in LEVELS else 0,
        )
        selected = st.multiselect("Equipment", EQUIPMENT_OPTIONS, default=selected_default)
        other_equipment = st.text_input("Other equipment (comma separated)", value=other_default)
        availability = st.text_input(
            "Availability", value=existing.availability, placeholder="e.g. 3 x 45 minutes per week"
        )
        limitations = st.text_area("Injuries / limitations", value=existing.limitations)
        c1, c2, c3 = st.columns(3)
        unit = c1.selectbox("Unit", UNITS, index=UNITS.index(existing.unit) if existing.unit in UNITS else 0)
        initial_weight = c2.number_input(
            "Current weight", min_value=0.0, step=0.1,
            value=float(existing.current_weight or existing.initial_weight or 0),
        )
        target_weight = c3.number_input(
            "Target weight", min_value=0.0, step=0.1, value=float(existing.target_weight or 0)
        )
        submitted = st.form_submit_button("Start My Journey", type="primary")

    if not submitted:
        return

    if not goal.strip():
        st.warning("Please enter a goal.")
        return

    profile = UserProfile(
        name=existing.name,
        goal=goal.strip(),
        level=level,
        equipment=parse_equipment(selected, other_equipment),
        availability=availability.strip(),
        limitations=limitations.strip(),
        initial_weight=initial_weight,
        target_weight=target_weight,
        unit=unit,
    )
    with st.spinner("🤖 Building your long-term strategy..."):
        result = coach.complete_onboarding(profile)
    if result.ok:
        nav_to("dashboard")
    render_result(result)
