"""
State machine for the reel position owner.

States:
    IDLE: Idle drift owns the scroll position
    SPINNING: The spin resolver owns the scroll position

The state doubles as the mutual-exclusion flag between the two writers.
"""

from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class ReelState(Enum):
    """Reel animation states."""
    IDLE = auto()
    SPINNING = auto()


class StateMachine:
    """
    Manages the reel state and transitions.

    Only IDLE -> SPINNING and SPINNING -> IDLE are valid; anything else
    is refused so that a second spin can never start on top of the first.
    """

    VALID_TRANSITIONS: list[tuple[ReelState, ReelState]] = [
        (ReelState.IDLE, ReelState.SPINNING),
        (ReelState.SPINNING, ReelState.IDLE),
    ]

    def __init__(self, initial_state: ReelState = ReelState.IDLE) -> None:
        self._state = initial_state
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> ReelState:
        """Get current state."""
        return self._state

    @property
    def is_spinning(self) -> bool:
        return self._state is ReelState.SPINNING

    def can_transition(self, to_state: ReelState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: ReelState) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.debug(f"State transition: {old_state.name} -> {to_state.name}")
        return True

