"""
Working application state and its reconciliation with identity and history.

The reconciler owns a single AppState value. Every transition builds a new
AppState and swaps it in whole; nested structures are never patched in place.
"""

import math
from datetime import datetime, timezone

from loguru import logger

from forgeai.errors import PersistenceError, WeightSaveError
from forgeai.models import AppState, HistoryEntry

RESET_AND_RELOAD = "reset_and_reload"
RELOAD = "reload"
CLEARED = "cleared"
NO_CHANGE = "none"


def compute_consistency(history):
    """
    Percentage of sessions marked completed, rounded half up and clamped to [0, 100].

    An empty history yields 0.
    """
    history = history or []
    total = max(len(history), 1)
    completed = sum(1 for entry in history if entry.status == "completed")
    return int(math.floor(min(100, completed / total * 100) + 0.5))


class StateReconciler:
    """Keeps working state consistent with one identity and one history stream."""

    def __init__(self, store, state=None, cache=None):
        """
        Initialize the reconciler.

        Args:
            store: HistoryStore (persistence collaborator)
            state: Optional AppState to start from, e.g. rehydrated from the cache
            cache: Optional LocalCache written after every transition
        """
        self.store = store
        self.cache = cache
        self.user_id = None
        self.state = state or AppState()

    def _commit(self, **changes):
        self.state = self.state.model_copy(update=changes)
        if self.cache is not None:
            self.cache.save_state(self.state)
        return self.state

    def on_auth_change(self, user_id):
        """
        React to the authenticated identity changing.

        Args:
            user_id: Newly authenticated identity, or None after sign-out

        Returns:
            The action taken: RESET_AND_RELOAD, RELOAD, CLEARED or NO_CHANGE
        """
        self.user_id = user_id
        state = self.state

        if not user_id:
            if state.has_personal_data:
                logger.info("User signed out, clearing working state")
                self.clear()
                return CLEARED
            return NO_CHANGE

        profile_mismatch = state.profile is not None and state.profile.user_id != user_id
        orphaned = state.profile is None and bool(state.history or state.current_workout)

        if profile_mismatch or orphaned:
            logger.info("User mismatch or orphaned data detected, clearing state and reloading")
            self.clear()
            self.load_for_identity(user_id)
            return RESET_AND_RELOAD

        if not state.history:
            self.load_for_identity(user_id)
            return RELOAD

        return NO_CHANGE

    def load_for_identity(self, user_id):
        """Replace working history with the persisted history of user_id."""
        self._commit(is_initial_loading=True)
        try:
            history = self.store.fetch_history(user_id)
        except PersistenceError as exc:
            logger.error(f"Error loading user history: {exc}")
            self._commit(is_initial_loading=False)
            return False

        if user_id != self.user_id:
            logger.warning(f"Discarding history fetched for {user_id}; identity changed meanwhile")
            self._commit(is_initial_loading=False)
            return False

        self._commit(
            history=history,
            global_consistency=compute_consistency(history),
            is_initial_loading=False,
        )
        logger.info(f"Loaded {len(history)} history entries for {user_id}")
        return True

    def clear(self):
        """
        Discard all working state.

        Request counters survive so that plan requests issued before the
        reset can never be applied after it.
        """
        seq = self.state.plan_request_seq
        self.state = AppState(plan_request_seq=seq, applied_request_seq=seq)
        if self.cache is not None:
            self.cache.save_state(self.state)
        return self.state

    def sync_profile(self, profile):
        """
        Adopt a persisted profile if it belongs to the authenticated identity.

        Returns:
            True when the profile was adopted
        """
        if profile is None or not self.user_id or profile.user_id != self.user_id:
            return False

        weight = profile.current_weight or profile.initial_weight or self.state.current_weight
        self._commit(profile=profile, current_weight=weight)
        return True

    def begin_plan_request(self):
        """Reserve a sequence number for a new plan-generation request."""
        seq = self.state.plan_request_seq + 1
        self._commit(plan_request_seq=seq)
        return seq

    def _is_stale(self, request_seq):
        if request_seq is None:
            return False
        if request_seq <= self.state.applied_request_seq:
            logger.info(f"Discarding stale plan response #{request_seq}")
            return True
        return False

    def apply_new_plan(self, plan, request_seq=None):
        """
        Make plan the current workout and adopt its phase and fatigue.

        Args:
            plan: Canonical WorkoutPlan
            request_seq: Sequence number from begin_plan_request, if any

        Returns:
            False when the response was older than the one already applied
        """
        if self._is_stale(request_seq):
            return False

        self._commit(
            current_workout=plan,
            global_phase=plan.phase or self.state.global_phase,
            global_fatigue=plan.fatigue_level or self.state.global_fatigue,
            applied_request_seq=request_seq or self.state.applied_request_seq,
        )
        return True

    def apply_onboarding(self, profile, plan, request_seq=None):
        """Install a freshly onboarded profile together with its first plan."""
        if self._is_stale(request_seq):
            return False

        self._commit(
            profile=profile,
            current_workout=plan,
            global_phase=plan.phase,
            global_consistency=compute_consistency(self.state.history),
            current_weight=profile.initial_weight,
            applied_request_seq=request_seq or self.state.applied_request_seq,
        )
        return True

    def record_history_entry(self, status, feedback="", difficulty=5, date=None):
        """
        Close the current workout as a history entry.

        The entry is prepended to working history and persisted; a failed
        write is logged and does not roll back the local update.

        Returns:
            The new HistoryEntry, or None when there is no current workout
        """
        if self.state.current_workout is None:
            return None

        entry = HistoryEntry(
            date=date or datetime.now(timezone.utc).isoformat(),
            workout=self.state.current_workout,
            status=status,
            feedback=feedback or "",
            difficulty=difficulty,
        )
        history = [entry] + list(self.state.history)
        self._commit(
            history=history,
            current_workout=None,
            global_consistency=compute_consistency(history),
        )

        if self.user_id:
            try:
                self.store.insert_history(self.user_id, entry)
            except PersistenceError as exc:
                logger.error(f"Error saving history: {exc}")
        return entry

    def set_weight(self, weight):
        """
        Update the current weight locally, then persist it.

        Raises:
            WeightSaveError: If the write fails; the local value is kept
        """
        self._commit(current_weight=weight)
        if not self.user_id:
            return

        try:
            self.store.upsert_weight(self.user_id, weight)
        except PersistenceError as exc:
            logger.error(f"Error updating weight: {exc}")
            raise WeightSaveError("Failed to save weight. Please check your connection.") from exc
        logger.info(f"Weight updated successfully to: {weight}")
