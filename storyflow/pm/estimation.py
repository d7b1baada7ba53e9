"""
Estimation rules for stories.

Only features carry estimates; chores, bugs and releases never do. An estimate
must come from the point scale configured on the story's project, resolved by
name when the estimate is checked.
"""

import logging

from storyflow.lib.point_scales import PointScaleRegistry, UnknownPointScale, default_registry
from storyflow.lib.types import FieldError
from storyflow.pm.models import StoryType

logger = logging.getLogger(__name__)

NOT_IN_SCALE = "is not an allowed value for this project"
NOT_ESTIMABLE_TYPE = "is not allowed for this story type"


def allows_estimate(story_type) -> bool:
    """Fixed business rule: features are the only estimable type."""
    return story_type == StoryType.FEATURE


def is_estimated(estimate) -> bool:
    """True when an estimate is present. Zero is a real estimate."""
    return estimate is not None


def is_estimable(story_type, estimate=None) -> bool:
    """True for a feature that is still waiting for its estimate."""
    return allows_estimate(story_type) and not is_estimated(estimate)


def validate_estimate(
    story_type,
    estimate,
    project,
    registry: PointScaleRegistry | None = None,
) -> list[FieldError]:
    """Check an estimate against the story type and the project's point scale.

    Args:
        story_type: Story type value ("feature", "chore", ...)
        estimate: Candidate estimate, or None
        project: Project whose point_scale names the allowed values
        registry: Point scale lookup (the project's, then built-in, when None)

    Returns:
        List of FieldError on the "estimate" field, empty when valid
    """
    if not is_estimated(estimate):
        return []

    if not allows_estimate(story_type):
        return [FieldError("estimate", NOT_ESTIMABLE_TYPE, "not_estimable")]

    if project is None:
        # Missing project is reported on the project field
        return []

    registry = registry or project.point_scales or default_registry()
    try:
        scale = registry.resolve(project.point_scale)
    except UnknownPointScale as e:
        logger.warning(f"[STORY] Cannot validate estimate {estimate!r}: {e}")
        return [FieldError(
            "estimate",
            f"cannot be validated, unknown point scale '{e.name}'",
            "unknown_scale",
        )]

    if estimate not in scale:
        return [FieldError("estimate", NOT_IN_SCALE, "not_in_scale")]
    return []
