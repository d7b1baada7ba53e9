"""
Backlog ordering for stories.

Positions are opaque sort keys. New stories go to the end of their project's
list; an explicit position, fractional or not, is kept as given so a story can
be dropped between two neighbours without renumbering them. Positions are not
required to be distinct.

Callers creating stories concurrently must serialize allocation per project.
"""


def sibling_positions(project) -> list:
    """Positions currently held by the project's stories."""
    return [s.position for s in project.stories if s.position is not None]


def next_position(project):
    """One past the highest position in the project, or 1 for an empty project."""
    positions = sibling_positions(project)
    if not positions:
        return 1
    return max(positions) + 1


def assign_position(explicit_position, project):
    """Position for a story being added to `project`."""
    if explicit_position is not None:
        return explicit_position
    return next_position(project)
