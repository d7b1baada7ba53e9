"""Story workflow operations on top of the FSM in fsm.py.

All transition logic lives in fsm.py - this module provides:
- StoryState enum for type safety
- events() listing the triggers available from a state
- fire() applying a trigger to a story

Usage:
    from storyflow.workflow.state_machine import fire, events

    events("delivered")   # ["accept", "reject"]
    fire(story, "start")  # story.state == "started"
"""

import logging
from datetime import date
from enum import Enum
from typing import Callable

from transitions import MachineError

from storyflow.workflow.fsm import DEST_FOR, StoryFSM

logger = logging.getLogger(__name__)


class StoryState(str, Enum):
    """All valid story states.

    Values match FSM state strings for compatibility.
    """

    UNSTARTED = "unstarted"
    UNSCHEDULED = "unscheduled"

    # Work in progress
    STARTED = "started"
    FINISHED = "finished"
    DELIVERED = "delivered"

    # Outcomes of delivery
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class InvalidTransition(Exception):
    """Raised when firing an event the current state does not allow."""

    def __init__(self, from_state: str, event: str, story_label: str = ""):
        self.from_state = from_state
        self.event = event
        self.story_label = story_label
        super().__init__(
            f"Invalid transition: cannot {event} from {from_state}"
            + (f" (story: {story_label})" if story_label else "")
        )


def parse_state(state_str: str | None) -> StoryState | None:
    """Parse a state string into StoryState enum.

    Returns None if state is unknown.
    """
    if state_str is None:
        return None
    for state in StoryState:
        if state.value == state_str:
            return state
    return None


def events(state: str | None) -> list[str]:
    """Events that may fire from `state`, in transition table order.

    Unknown states have no events.
    """
    parsed = parse_state(state)
    if parsed is None:
        return []
    return StoryFSM(parsed.value).get_available_triggers()


def can_fire(story, event: str) -> bool:
    """Check if `event` is allowed from the story's current state."""
    return event in events(story.state)


def _label(story) -> str:
    story_id = getattr(story, "id", None)
    return f"#{story_id}" if story_id is not None else repr(getattr(story, "title", ""))


def fire(
    story,
    event: str,
    on_transition: Callable[[str, str, str], None] | None = None,
    today: Callable[[], date] = date.today,
) -> None:
    """Fire a lifecycle event on a story.

    On success the story's state, and accepted_at for the accept event, are
    updated together. On failure the story is left untouched.

    Args:
        story: Object with `state` and `accepted_at` attributes
        event: Trigger name ("start", "finish", "deliver", "accept", "reject")
        on_transition: Optional callback(from_state, to_state, trigger)
        today: Clock used for the accepted_at stamp

    Raises:
        InvalidTransition: If the event is not allowed from the current state
    """
    parsed = parse_state(story.state)
    label = _label(story)

    if parsed is None or (parsed.value, event) not in DEST_FOR:
        logger.debug(f"[STATE] {label}: refused {event} from {story.state}")
        raise InvalidTransition(str(story.state), event, label)

    current_state = parsed.value
    fsm = StoryFSM(current_state, label=label, on_transition=on_transition, today=today)
    try:
        getattr(fsm, event)()
    except MachineError as e:
        raise InvalidTransition(current_state, event, label) from e

    story.state = fsm.state
    if fsm.accepted_at is not None and story.accepted_at is None:
        story.accepted_at = fsm.accepted_at
