"""Engine lifecycle state machine."""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


_TRANSITIONS = {
    EngineState.IDLE: (EngineState.RUNNING,),
    EngineState.RUNNING: (EngineState.STOPPED,),
    EngineState.STOPPED: (EngineState.RUNNING,),
}


class EngineStateMachine:
    """Tracks the lifecycle and rejects transitions the lifecycle does not allow."""

    def __init__(self) -> None:
        self._state = EngineState.IDLE

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is EngineState.RUNNING

    def can_transition(self, target: EngineState) -> bool:
        return target in _TRANSITIONS[self._state]

    def transition(self, target: EngineState) -> bool:
        """Move to ``target``; returns False and leaves the state alone when not allowed."""
        if not self.can_transition(target):
            logger.debug("Ignoring transition %s -> %s", self._state.value, target.value)
            return False
        logger.debug("Engine state %s -> %s", self._state.value, target.value)
        self._state = target
        return True


__all__ = ["EngineState", "EngineStateMachine"]
