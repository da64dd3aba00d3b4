import pytest

from dictation_assistant.domain.state import (
    SessionState,
    InvalidTransitionError,
    validate_transition,
)


class TestStateTransitions:
    def test_idle_to_active(self):
        validate_transition(SessionState.IDLE, SessionState.ACTIVE)

    def test_active_to_idle(self):
        validate_transition(SessionState.ACTIVE, SessionState.IDLE)

    def test_invalid_idle_to_idle(self):
        with pytest.raises(InvalidTransitionError):
            validate_transition(SessionState.IDLE, SessionState.IDLE)

    def test_invalid_active_to_active(self):
        with pytest.raises(InvalidTransitionError):
            validate_transition(SessionState.ACTIVE, SessionState.ACTIVE)
