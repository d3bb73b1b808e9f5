"""Core framework components for the reel display."""

from .state import ReelState, StateMachine
from .events import EventBus, Event, EventType

__all__ = ["ReelState", "StateMachine", "EventBus", "Event", "EventType"]
