"""
State machine enforcing the order of call builder operations.
"""

import logging
import threading
from enum import IntEnum

from .exceptions import StateOrderError

# Set up logger for this module
logger = logging.getLogger(__name__)


class CallState(IntEnum):
    """Phases of a single call, in the only order they may be entered."""

    INITIALISED = 0
    BOUND = 1
    ASSERTIONS = 2
    EXECUTED = 3


class CallStateMachine:
    """Tracks the phase of one call and rejects out-of-order operations.

    Each builder operation names the latest state it may be invoked from and
    the state it moves the call into. The state only ever increases.
    """

    def __init__(self):
        self._state = CallState.INITIALISED
        self._lock = threading.Lock()

    @property
    def state(self) -> CallState:
        return self._state

    def transition(self, from_state: CallState, to_state: CallState) -> None:
        """Move to ``to_state`` unless the call has already gone past ``from_state``.

        Args:
            from_state: The latest state the operation may be invoked from
            to_state: The state entered when the check passes

        Raises:
            StateOrderError: If the current state exceeds ``from_state``. The
                state is left unchanged.
        """
        with self._lock:
            if self._state > from_state:
                logger.debug(f"Rejected transition {from_state.name} -> {to_state.name} from {self._state.name}")
                raise StateOrderError(
                    f"Call builder methods have been called out of order: cannot move to {to_state.name} "
                    f"once the call is {self._state.name}",
                    current_state=self._state,
                    required_state=from_state,
                )
            logger.debug(f"Call state {self._state.name} -> {to_state.name}")
            self._state = to_state
