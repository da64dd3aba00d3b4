from collections.abc import Awaitable, Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class ControlCommand:
    action: str
    payload: dict | None = None


CommandHandler = Callable[[ControlCommand], Awaitable[dict]]
