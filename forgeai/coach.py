"""
Coaching session orchestration.

ForgeCoach is the seam between the UI and the core: it asks the agent for
plans, runs them through the extraction pipeline and hands complete results
to the StateReconciler. Errors are caught here, at the call site that
started the action, and turned into user-facing results; the previous
state stays in place until a complete new one replaces it.
"""

from dataclasses import dataclass

from loguru import logger

from forgeai.errors import AgentTransportError, PersistenceError, PlanParseError, WeightSaveError
from forgeai.prompt_builder import build_next_workout_request, build_onboarding_request
from forgeai.state import StateReconciler
from forgeai.workout_pipeline import get_structured_workout


@dataclass
class ActionResult:
    ok: bool
    message: str = ""
    plan: object = None
    blocking: bool = False


class ForgeCoach:
    """Drives onboarding, plan requests, session completion and weight updates."""

    def __init__(self, agent, store, cache=None, state=None):
        """
        Initialize the coach.

        Args:
            agent: AgentClient (or anything with send_prompt/generate_forge_response)
            store: HistoryStore
            cache: Optional LocalCache; the cached state is rehydrated when
                no explicit state is given
            state: Optional starting AppState
        """
        self.agent = agent
        self.store = store
        self.cache = cache
        if state is None and cache is not None:
            state = cache.load_state()
        self.reconciler = StateReconciler(store, state=state, cache=cache)
        self.agent_raw_text = ""

    @property
    def state(self):
        return self.reconciler.state

    @property
    def user_id(self):
        return self.reconciler.user_id

    def sign_in(self, user_id):
        """Authenticate as user_id, reconcile working state and sync the stored profile."""
        action = self.reconciler.on_auth_change(user_id)
        try:
            profile = self.store.get_profile(user_id)
        except PersistenceError as exc:
            logger.error(f"Error fetching profile: {exc}")
            return action
        self.reconciler.sync_profile(profile)
        return action

    def sign_out(self):
        return self.reconciler.on_auth_change(None)

    def needs_onboarding(self):
        profile = self.state.profile
        return profile is None or not profile.goal

    def _generate_plan(self, user_input, profile, history):
        text = self.agent.generate_forge_response(
            user_input, profile, history, self.state.agent_state
        )
        plan = get_structured_workout(text, self.agent)
        return text, plan

    def complete_onboarding(self, profile):
        """
        Store a new profile and generate the first plan for it.

        Args:
            profile: UserProfile collected by the onboarding form

        Returns:
            ActionResult carrying the first WorkoutPlan on success
        """
        if self.user_id:
            profile = profile.model_copy(update={"user_id": self.user_id})

        seq = self.reconciler.begin_plan_request()
        try:
            text, plan = self._generate_plan(build_onboarding_request(profile), profile, [])
        except (AgentTransportError, PlanParseError) as exc:
            logger.error(f"Error completing onboarding: {exc}")
            return ActionResult(False, f"Failed to generate workout: {exc}")

        if self.user_id:
            try:
                self.store.save_profile(self.user_id, profile)
            except PersistenceError as exc:
                logger.error(f"Error saving profile: {exc}")

        if not self.reconciler.apply_onboarding(profile, plan, request_seq=seq):
            return ActionResult(False, "A newer plan request superseded this one.")
        self.agent_raw_text = text
        return ActionResult(True, "Onboarding complete.", plan=plan)

    def request_next_workout(self, user_context=None):
        """
        Ask the agent for the next session.

        Args:
            user_context: Optional free-text request for today's session

        Returns:
            ActionResult carrying the new WorkoutPlan on success
        """
        state = self.state
        if state.profile is None:
            return ActionResult(False, "Complete onboarding before requesting a workout.")

        seq = self.reconciler.begin_plan_request()
        try:
            text, plan = self._generate_plan(
                build_next_workout_request(state, user_context),
                state.profile,
                state.history,
            )
        except (AgentTransportError, PlanParseError) as exc:
            logger.error(f"Error generating workout: {exc}")
            return ActionResult(False, f"Failed to generate workout: {exc}")

        if not self.reconciler.apply_new_plan(plan, request_seq=seq):
            return ActionResult(False, "A newer plan request superseded this one.")
        self.agent_raw_text = text
        return ActionResult(True, f"New session ready: {plan.title}", plan=plan)

    def finish_workout(self, status, feedback="", difficulty=5):
        """Record the current workout as completed, skipped or partial."""
        entry = self.reconciler.record_history_entry(status, feedback, difficulty)
        if entry is None:
            return ActionResult(False, "There is no active workout to finish.")
        return ActionResult(True, f"Session logged as {status}.")

    def update_weight(self, weight):
        """Update current weight; a failed save is returned as a blocking alert."""
        try:
            self.reconciler.set_weight(weight)
        except WeightSaveError as exc:
            return ActionResult(False, str(exc), blocking=True)
        return ActionResult(True, f"Weight updated to {weight}.")

    def theme(self):
        return self.cache.load_theme() if self.cache is not None else "dark"

    def toggle_theme(self):
        new_theme = "light" if self.theme() == "dark" else "dark"
        if self.cache is not None:
            self.cache.save_theme(new_theme)
        return new_theme
