from enum import Enum, auto


class SessionState(Enum):
    IDLE = auto()
    ACTIVE = auto()


VALID_TRANSITIONS: dict[SessionState, set[SessionState]] = {
    SessionState.IDLE: {SessionState.ACTIVE},
    SessionState.ACTIVE: {SessionState.IDLE},
}


class InvalidTransitionError(Exception):
    pass


def validate_transition(current: SessionState, target: SessionState) -> None:
    if target not in VALID_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot transition from {current.name} to {target.name}")
