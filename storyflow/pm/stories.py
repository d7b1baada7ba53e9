"""
Story lifecycle operations for PM module.

Stories live in their project's `stories` list, which stands in for the
persistence layer: saving validates the story, assigns id and position on
first save, and keeps timestamps current.
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from storyflow.lib.config import StoryflowConfig, load_config
from storyflow.lib.point_scales import PointScaleRegistry
from storyflow.pm.models import Column, Project, Story, User
from storyflow.pm.positions import assign_position
from storyflow.workflow.state_machine import StoryState

logger = logging.getLogger(__name__)

# Fields update_story() may assign
UPDATABLE_FIELDS = {
    "title",
    "description",
    "story_type",
    "state",
    "estimate",
    "owned_by",
    "requested_by",
    "position",
    "project",
}


def generate_story_id(project: Project) -> int:
    """Generate next story ID for project."""
    ids = [s.id for s in project.stories if s.id is not None]
    return max(ids) + 1 if ids else 1


def save_story(
    story: Story,
    registry: Optional[PointScaleRegistry] = None,
    now: Callable[[], datetime] = datetime.now,
    today: Callable[[], date] = date.today,
) -> bool:
    """Validate and store a story in its project.

    Args:
        story: Story to save
        registry: Point scale lookup, kept on the story for later checks
                  (story's own, then the project's, then built-in, when None)
        now: Clock for created_at / updated_at
        today: Clock for accepted_at

    Returns:
        True if saved, False if the story is invalid (see story.errors)
    """
    if registry is not None:
        story.point_scales = registry

    errors = story.validate()
    if errors:
        logger.debug(f"[STORY] Not saving {story.title!r}: {errors.full_messages()}")
        return False

    project = story.project
    timestamp = now()

    if story.state == StoryState.ACCEPTED and story.accepted_at is None:
        story.accepted_at = today()

    if story not in project.stories:
        story.id = story.id if story.id is not None else generate_story_id(project)
        story.position = assign_position(story.position, project)
        story.created_at = story.created_at or timestamp
        project.stories.append(story)
        logger.info(f"[STORY] Created #{story.id} {story.title!r} at position {story.position}")

    story.updated_at = timestamp
    story.clear_transition_errors()
    return True


def create_story(
    project: Project,
    requested_by: User,
    registry: Optional[PointScaleRegistry] = None,
    **attrs,
) -> Story:
    """Create a new story in a project.

    Args:
        project: Project the story belongs to
        requested_by: Requesting user; must be a project member
        registry: Point scale lookup for validation
        **attrs: Other Story fields (title, story_type, estimate, position, ...)

    Returns:
        The story. It is saved only if valid; check story.id or story.errors.
    """
    story = Story(project=project, requested_by=requested_by, point_scales=registry, **attrs)
    if not save_story(story):
        logger.info(f"[STORY] Invalid story {story.title!r}: {story.errors.full_messages()}")
    return story


def update_story(
    story: Story,
    updates: dict,
    registry: Optional[PointScaleRegistry] = None,
) -> bool:
    """Assign new field values and save.

    Moving a story to another project takes it out of the old project's list;
    it is then saved as new there, with a fresh id and, unless one is given,
    the next position.

    Raises:
        ValueError: If updates names a field that cannot be assigned
    """
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown story fields: {sorted(unknown)}")

    if registry is not None:
        story.point_scales = registry

    previous = story.project
    for key, value in updates.items():
        setattr(story, key, value)

    moved = previous is not None and story.project is not previous and story in previous.stories
    if moved:
        if story.validate():
            return False
        previous.stories.remove(story)
        story.id = None
        story.position = updates.get("position")
        logger.info(f"[STORY] Moving {story.title!r} from project {previous.id} to {story.project.id}")

    return save_story(story)


def list_stories(project: Project) -> list[Story]:
    """Project's stories in display order (position, then id)."""
    return sorted(
        project.stories,
        key=lambda s: (s.position is None, s.position or 0, s.id or 0),
    )


def get_stories_by_column(project: Project, column: Column | str) -> list[Story]:
    """Stories shown in a display column, in display order."""
    return [s for s in list_stories(project) if s.column() == column]


def create_project(
    name: str,
    users: Optional[list[User]] = None,
    config: Optional[StoryflowConfig] = None,
    **attrs,
) -> Project:
    """Create a project using the configured point scales and default scale."""
    config = config or load_config()
    attrs.setdefault("point_scale", config.default_point_scale)
    attrs.setdefault("point_scales", config.registry())
    return Project(name=name, users=list(users or []), **attrs)
