"""
PM (Project Management) module for storyflow.

Holds the story aggregate, the rules for estimating stories against a
project's point scale, backlog ordering, and the story lifecycle operations.
"""

from storyflow.pm.models import Column, Project, Story, StoryType, User
from storyflow.pm.estimation import (
    allows_estimate,
    is_estimable,
    is_estimated,
    validate_estimate,
)
from storyflow.pm.positions import assign_position, next_position
from storyflow.pm.stories import (
    create_project,
    create_story,
    save_story,
    update_story,
    list_stories,
    get_stories_by_column,
)

__all__ = [
    "Column",
    "Project",
    "Story",
    "StoryType",
    "User",
    "allows_estimate",
    "is_estimable",
    "is_estimated",
    "validate_estimate",
    "assign_position",
    "next_position",
    "create_project",
    "create_story",
    "save_story",
    "update_story",
    "list_stories",
    "get_stories_by_column",
]
