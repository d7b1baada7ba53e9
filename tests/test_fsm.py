"""Tests for storyflow.workflow.fsm module."""

import pytest
from datetime import date

from transitions import MachineError

from storyflow.workflow.fsm import (
    StoryFSM,
    STATES,
    TRANSITIONS,
    DEST_FOR,
    INITIAL_STATE,
)


class TestFSMStates:
    """Tests for FSM state definitions."""

    def test_all_states_defined(self):
        """All expected states should be defined."""
        expected = [
            "unstarted", "unscheduled", "started", "finished",
            "delivered", "rejected", "accepted",
        ]
        assert set(STATES) == set(expected)

    def test_initial_state_is_unstarted(self):
        assert INITIAL_STATE == "unstarted"
        assert StoryFSM().state == "unstarted"

    def test_unknown_initial_state_raises(self):
        with pytest.raises(ValueError, match="Unknown story state"):
            StoryFSM("flum")


class TestFSMBasic:
    """Basic FSM functionality tests."""

    def test_start_from_each_startable_state(self):
        """start should reach started from unstarted, unscheduled and rejected."""
        for initial in ("unstarted", "unscheduled", "rejected"):
            fsm = StoryFSM(initial)
            fsm.start()
            assert fsm.state == "started"

    def test_full_happy_path(self):
        """start -> finish -> deliver -> accept."""
        fsm = StoryFSM()

        fsm.start()
        assert fsm.state == "started"

        fsm.finish()
        assert fsm.state == "finished"

        fsm.deliver()
        assert fsm.state == "delivered"

        fsm.accept()
        assert fsm.state == "accepted"

    def test_rejection_path(self):
        """Rejected stories can be started again."""
        fsm = StoryFSM("delivered")

        fsm.reject()
        assert fsm.state == "rejected"

        fsm.start()
        assert fsm.state == "started"

    def test_available_triggers_in_table_order(self):
        assert StoryFSM("unstarted").get_available_triggers() == ["start"]
        assert StoryFSM("started").get_available_triggers() == ["finish"]
        assert StoryFSM("finished").get_available_triggers() == ["deliver"]
        assert StoryFSM("delivered").get_available_triggers() == ["accept", "reject"]
        assert StoryFSM("accepted").get_available_triggers() == []

    def test_can_method(self):
        fsm = StoryFSM("delivered")
        assert fsm.can("accept") is True
        assert fsm.can("reject") is True
        assert fsm.can("start") is False

    def test_invalid_transition_raises(self):
        fsm = StoryFSM()
        with pytest.raises(MachineError):
            fsm.finish()  # Can't finish an unstarted story
        assert fsm.state == "unstarted"

    def test_no_auto_transitions(self):
        """Only explicit triggers exist - no to_<state> shortcuts."""
        fsm = StoryFSM()
        assert not hasattr(fsm, "to_accepted")


class TestAcceptedStamp:
    """Tests for the accepted_at side effect."""

    def test_accept_stamps_date(self):
        fsm = StoryFSM("delivered", today=lambda: date(2024, 3, 1))
        assert fsm.accepted_at is None
        fsm.accept()
        assert fsm.accepted_at == date(2024, 3, 1)

    def test_reject_does_not_stamp(self):
        fsm = StoryFSM("delivered", today=lambda: date(2024, 3, 1))
        fsm.reject()
        assert fsm.accepted_at is None


class TestOnTransition:
    """Tests for the transition callback and logging."""

    def test_on_transition_callback(self):
        recorded = []

        def callback(from_state, to_state, trigger):
            recorded.append((from_state, to_state, trigger))

        fsm = StoryFSM(on_transition=callback)
        fsm.start()

        assert recorded == [("unstarted", "started", "start")]

    def test_transition_logged(self, caplog):
        caplog.set_level("INFO", logger="storyflow.workflow.fsm")
        fsm = StoryFSM(label="#7")
        fsm.start()
        assert "[FSM] #7: unstarted -> started (start)" in caplog.text


class TestDestLookup:
    """Tests for DEST_FOR lookup table."""

    def test_has_entry_per_source(self):
        expected = sum(
            len(t["source"]) if isinstance(t["source"], list) else 1
            for t in TRANSITIONS
        )
        assert len(DEST_FOR) == expected

    def test_maps_to_correct_destinations(self):
        assert DEST_FOR[("unstarted", "start")] == "started"
        assert DEST_FOR[("rejected", "start")] == "started"
        assert DEST_FOR[("delivered", "accept")] == "accepted"
        assert DEST_FOR[("delivered", "reject")] == "rejected"

    def test_accepted_has_no_outgoing(self):
        """accepted is terminal - no outgoing transitions."""
        outgoing = [k for k in DEST_FOR if k[0] == "accepted"]
        assert outgoing == []
