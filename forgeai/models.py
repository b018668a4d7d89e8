"""ForgeAI data models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

FATIGUE_LEVELS = ("low", "medium", "high")
AGENT_FOCUS_VALUES = ("Planning", "Executing", "Evaluating", "Adapting")
HISTORY_STATUSES = ("completed", "skipped", "partial")


class Exercise(BaseModel):
    """One trainable movement instance."""
    name: str = Field(min_length=1)
    sets: str | None = None
    reps: str | None = None
    duration: str | None = None
    notes: str | None = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class WorkoutPlan(BaseModel):
    """A canonical, fully defaulted coaching session."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    warmup: list[Exercise] = []
    main_exercises: list[Exercise] = Field(default=[], alias="mainExercises")
    cooldown: list[Exercise] = []
    reasoning: str
    alternatives: str
    metrics_to_track: str = Field(alias="metricsToTrack")
    phase: str
    fatigue_level: str = Field(alias="fatigueLevel")
    consistency_score: int | float = Field(alias="consistencyScore")
    agent_focus: str = Field(alias="agentFocus")

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys the agent and the store use."""
        return self.model_dump(by_alias=True, exclude_none=True)


class HistoryEntry(BaseModel):
    """One completed, skipped or partial session."""
    date: str
    workout: WorkoutPlan
    status: str
    feedback: str = ""
    difficulty: int = 5

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        if value not in HISTORY_STATUSES:
            raise ValueError(f"status must be one of {', '.join(HISTORY_STATUSES)}")
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def clamp_difficulty(cls, value) -> int:
        try:
            value = int(value)
        except (TypeError, ValueError):
            return 5
        return max(1, min(10, value))


class UserProfile(BaseModel):
    """Profile of the authenticated user; `user_id` anchors ownership."""
    user_id: str | None = None
    name: str | None = None
    goal: str = ""
    equipment: list[str] = []
    level: str = "beginner"
    availability: str = ""
    limitations: str = ""
    initial_weight: float = 0
    target_weight: float = 0
    current_weight: float | None = None
    unit: str = "kg"


class AgentState(BaseModel):
    """Running statistics derived from history."""
    phase: str = "Initialization"
    consistency: int = 0
    fatigue: str = "low"


class AppState(BaseModel):
    """Working application state owned by the StateReconciler."""
    profile: UserProfile | None = None
    history: list[HistoryEntry] = []
    current_workout: WorkoutPlan | None = None
    is_initial_loading: bool = False
    global_phase: str = "Initialization"
    global_consistency: int = 0
    global_fatigue: str = "low"
    current_weight: float = 0
    plan_request_seq: int = 0
    applied_request_seq: int = 0

    @property
    def agent_state(self) -> AgentState:
        return AgentState(
            phase=self.global_phase,
            consistency=self.global_consistency,
            fatigue=self.global_fatigue,
        )

    @property
    def has_personal_data(self) -> bool:
        return bool(self.profile or self.history or self.current_workout)
