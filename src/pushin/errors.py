"""Exceptions raised by pushin.

All of these signal misuse by a collaborator (time source, workout
progress source, target catalog). They are raised at the call site and
never leave the controller in a partially updated state.
"""

from .models.state import AccessState


class PushinError(ValueError):
    """Base class for pushin contract violations."""


class InvalidTransitionError(PushinError):
    """An operation was called from a state that does not allow it."""

    def __init__(self, operation: str, state: AccessState, detail: str = ""):
        self.operation = operation
        self.state = state
        message = f"Cannot {operation} while {state.value}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InvalidWorkoutError(PushinError):
    """A workout cannot be used to earn unlock time."""


class OutOfOrderTimeError(PushinError):
    """An instant earlier than one already observed was supplied."""

    def __init__(self, now: int, last_now: int | None):
        self.now = now
        self.last_now = last_now
        if last_now is None:
            super().__init__(f"Invalid instant {now}: time must be non-negative")
        else:
            super().__init__(
                f"Time went backwards: got {now}, already observed {last_now}"
            )


class MalformedTargetError(PushinError):
    """The target catalog contains a bad or duplicate identifier."""


class DailyCapReachedError(PushinError):
    """The day's unlock budget is spent; no more time can be earned today."""


class EmergencyUnlockUnavailableError(PushinError):
    """No emergency unlock can be granted (quota used up or not configured)."""
