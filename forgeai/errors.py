"""ForgeAI exceptions."""


class ForgeError(Exception):
    """Base exception for ForgeAI errors."""
    pass


class AgentTransportError(ForgeError):
    """Raised when the agent proxy is unreachable or answers with a non-2xx status."""

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class PlanParseError(ForgeError):
    """Raised when agent output cannot be turned into a workout plan, even after re-extraction."""

    def __init__(self, message, original_error=None, fallback_error=None, raw_text=None):
        super().__init__(message)
        self.original_error = original_error
        self.fallback_error = fallback_error
        self.raw_text = raw_text


class PersistenceError(ForgeError):
    """Raised when a read or write against the history store fails."""
    pass


class WeightSaveError(PersistenceError):
    """Raised when a weight update the user explicitly asked for could not be saved."""
    pass
