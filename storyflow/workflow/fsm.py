"""Story lifecycle state machine using transitions library.

The transition table below is the single source of truth for which events a
story may fire from each state and where they lead. Both event listing and
event execution go through a transitions.Machine built from it.

Usage:
    from storyflow.workflow.fsm import StoryFSM

    fsm = StoryFSM("unstarted")
    fsm.start()    # unstarted -> started
    fsm.finish()   # started -> finished
    fsm.deliver()  # finished -> delivered
    fsm.accept()   # delivered -> accepted, stamps accepted_at
"""

import logging
from datetime import date
from typing import Callable

from transitions import Machine

logger = logging.getLogger(__name__)


# State values must match StoryState enum for compatibility
STATES = [
    "unstarted",
    "unscheduled",
    "started",
    "finished",
    "delivered",
    "rejected",
    "accepted",
]

INITIAL_STATE = "unstarted"

# Declaration order fixes the order events() reports triggers in
TRANSITIONS = [
    {"trigger": "start", "source": ["unstarted", "unscheduled", "rejected"], "dest": "started"},
    {"trigger": "finish", "source": "started", "dest": "finished"},
    {"trigger": "deliver", "source": "finished", "dest": "delivered"},
    {"trigger": "accept", "source": "delivered", "dest": "accepted", "after": "stamp_accepted"},
    {"trigger": "reject", "source": "delivered", "dest": "rejected"},
]


def _sources(t: dict) -> list[str]:
    source = t["source"]
    return source if isinstance(source, list) else [source]


# Pre-computed lookup: (source, trigger) -> dest
def _build_dest_lookup() -> dict[tuple[str, str], str]:
    """Build lookup from (source, trigger) -> destination state."""
    lookup: dict[tuple[str, str], str] = {}
    for t in TRANSITIONS:
        for source in _sources(t):
            lookup[(source, t["trigger"])] = t["dest"]
    return lookup


DEST_FOR = _build_dest_lookup()


class StoryFSM:
    """State machine for a single story's lifecycle.

    Wraps the transitions library with story-specific logic:
    - Starts from the story's current state
    - Stamps accepted_at on delivered -> accepted
    - Logs all transitions
    """

    def __init__(
        self,
        initial: str = INITIAL_STATE,
        label: str = "story",
        on_transition: Callable[[str, str, str], None] | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize FSM for a story.

        Args:
            initial: Current state of the story; must be one of STATES
            label: Story identifier used in log lines
            on_transition: Optional callback(from_state, to_state, trigger) called after transitions
            today: Clock used for the accepted_at stamp

        Raises:
            ValueError: If initial is not a known state
        """
        if initial not in STATES:
            raise ValueError(f"Unknown story state: {initial!r}")

        self.label = label
        self.on_transition = on_transition
        self.today = today
        self.accepted_at: date | None = None

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=initial,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",
        )

    def stamp_accepted(self, event) -> None:
        """Side effect of the accept transition."""
        self.accepted_at = self.today()

    def on_state_change(self, event) -> None:
        """Callback after any state transition."""
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.info(f"[FSM] {self.label}: {from_state} -> {to_state} ({trigger})")

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)

    def get_available_triggers(self) -> list[str]:
        """Get list of triggers available in current state, in table order."""
        return self.machine.get_triggers(self.state)
