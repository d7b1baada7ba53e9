"""
Data models for PM module.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from storyflow.lib.point_scales import DEFAULT_POINT_SCALE, PointScaleRegistry
from storyflow.lib.types import Errors, FieldError
from storyflow.lib.validate import validate_view
from storyflow.workflow.state_machine import StoryState, parse_state


class StoryType(str, Enum):
    """Kinds of story. Only features are estimated."""

    FEATURE = "feature"
    CHORE = "chore"
    BUG = "bug"
    RELEASE = "release"


class Column(str, Enum):
    """Display buckets a story is shown in, derived from its state."""

    BACKLOG = "backlog"
    CHILLY_BIN = "chilly_bin"
    IN_PROGRESS = "in_progress"
    DONE = "done"


COLUMN_FOR_STATE = {
    StoryState.UNSTARTED: Column.BACKLOG,
    StoryState.UNSCHEDULED: Column.CHILLY_BIN,
    StoryState.STARTED: Column.IN_PROGRESS,
    StoryState.FINISHED: Column.IN_PROGRESS,
    StoryState.DELIVERED: Column.IN_PROGRESS,
    StoryState.REJECTED: Column.IN_PROGRESS,
    StoryState.ACCEPTED: Column.DONE,
}

# Keys of Story.as_view(), in output order
VIEW_FIELDS = (
    "title", "accepted_at", "created_at", "updated_at", "description",
    "project_id", "story_type", "owned_by_id", "requested_by_id", "estimate",
    "state", "position", "id", "events", "estimable", "estimated", "errors",
)


def parse_story_type(type_str: str | None) -> StoryType | None:
    """Parse a story type string into StoryType enum.

    Returns None if the type is unknown or missing.
    """
    if type_str is None:
        return None
    for story_type in StoryType:
        if story_type.value == type_str:
            return story_type
    return None


def _plain(value):
    """Store enum members by value so views serialise cleanly."""
    return value.value if isinstance(value, Enum) else value


def _isoformat(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(eq=False)
class User:
    """A person who requests or owns stories."""
    id: Optional[int] = None
    name: str = ""
    email: str = ""


@dataclass(eq=False)
class Project:
    """A project: its point scale name, its members and its stories.

    `stories` stands in for the sibling set the persistence layer would
    supply; position allocation and membership checks read it directly.
    `point_scales` is the configured lookup its point_scale name resolves
    in; the built-in scales are used when it is unset.
    """
    id: Optional[int] = None
    name: str = ""
    point_scale: str = DEFAULT_POINT_SCALE
    users: list[User] = field(default_factory=list)
    stories: list["Story"] = field(default_factory=list, repr=False)
    point_scales: Optional[PointScaleRegistry] = field(default=None, repr=False)

    def has_member(self, user: User) -> bool:
        for member in self.users:
            if member is user:
                return True
            if member.id is not None and member.id == user.id:
                return True
        return False


@dataclass(eq=False)
class Story:
    """A unit of work moving through the story lifecycle.

    State and type are kept as their string values. Unknown values may be
    assigned but make the story invalid, and no event can fire from an
    unknown state.
    """
    title: str = ""
    story_type: Optional[str] = StoryType.FEATURE.value
    state: str = StoryState.UNSTARTED.value
    estimate: Optional[float] = None
    project: Optional[Project] = field(default=None, repr=False)
    requested_by: Optional[User] = field(default=None, repr=False)
    owned_by: Optional[User] = field(default=None, repr=False)
    position: Optional[float] = None
    description: Optional[str] = None
    accepted_at: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = None
    point_scales: Optional[PointScaleRegistry] = field(default=None, repr=False)
    _transition_errors: list[FieldError] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        self.state = _plain(self.state)
        self.story_type = _plain(self.story_type)

    def __str__(self) -> str:
        return self.title

    # -- estimation ---------------------------------------------------------

    @property
    def estimable(self) -> bool:
        from storyflow.pm.estimation import is_estimable
        return is_estimable(self.story_type, self.estimate)

    @property
    def estimated(self) -> bool:
        from storyflow.pm.estimation import is_estimated
        return is_estimated(self.estimate)

    # -- workflow -----------------------------------------------------------

    @property
    def events(self) -> list[str]:
        from storyflow.workflow.state_machine import events
        return events(self.state)

    def fire_event(self, event: str) -> bool:
        """Fire a lifecycle event, recording a state error if it is refused.

        Returns True if the transition happened.
        """
        from storyflow.workflow.state_machine import InvalidTransition, fire

        try:
            fire(self, event)
        except InvalidTransition:
            self._transition_errors.append(
                FieldError("state", f"cannot transition via {event}", "invalid_transition")
            )
            return False
        self._transition_errors.clear()
        return True

    def start(self) -> bool:
        return self.fire_event("start")

    def finish(self) -> bool:
        return self.fire_event("finish")

    def deliver(self) -> bool:
        return self.fire_event("deliver")

    def accept(self) -> bool:
        return self.fire_event("accept")

    def reject(self) -> bool:
        return self.fire_event("reject")

    def clear_transition_errors(self) -> None:
        self._transition_errors.clear()

    # -- validation ---------------------------------------------------------

    def validate(self, registry: PointScaleRegistry | None = None) -> Errors:
        """Check every story invariant and return all failures together."""
        from storyflow.pm.estimation import validate_estimate

        errors = Errors()

        if not self.title or not str(self.title).strip():
            errors.add("title", "can't be blank", "blank")

        if parse_state(self.state) is None:
            errors.add("state", "is not included in the list", "inclusion")

        if not self.story_type:
            errors.add("story_type", "can't be blank", "blank")
        elif parse_story_type(self.story_type) is None:
            errors.add("story_type", "is not included in the list", "inclusion")

        if self.project is None:
            errors.add("project", "can't be blank", "blank")

        if self.requested_by is None:
            errors.add("requested_by", "can't be blank", "blank")
        elif self.project is not None and not self.project.has_member(self.requested_by):
            errors.add("requested_by", "is not a member of this project", "not_member")

        errors.extend(validate_estimate(
            self.story_type, self.estimate, self.project, registry or self.point_scales,
        ))
        return errors

    @property
    def errors(self) -> Errors:
        """Current validation failures plus any refused transition."""
        errors = self.validate()
        errors.extend(self._transition_errors)
        return errors

    def is_valid(self, registry: PointScaleRegistry | None = None) -> bool:
        return not self.validate(registry)

    # -- views --------------------------------------------------------------

    def column(self) -> Column | None:
        """Display column for the current state; None for an unknown state."""
        state = parse_state(self.state)
        return COLUMN_FOR_STATE[state] if state is not None else None

    def as_view(self) -> dict:
        """Structured representation for the presentation layer."""
        values = {
            "title": self.title,
            "accepted_at": _isoformat(self.accepted_at),
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
            "description": self.description,
            "project_id": self.project.id if self.project else None,
            "story_type": self.story_type,
            "owned_by_id": self.owned_by.id if self.owned_by else None,
            "requested_by_id": self.requested_by.id if self.requested_by else None,
            "estimate": self.estimate,
            "state": self.state,
            "position": self.position,
            "id": self.id,
            "events": self.events,
            "estimable": self.estimable,
            "estimated": self.estimated,
            "errors": self.errors.to_dict(),
        }
        return {name: values[name] for name in VIEW_FIELDS}

    def as_json(self) -> dict:
        """View wrapped under a "story" root key, checked against the story schema.

        Raises:
            SchemaValidationError: If the view does not match the schema
        """
        view = self.as_view()
        validate_view(view)
        return {"story": view}
