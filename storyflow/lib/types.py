"""
Shared data types for storyflow.

This module contains the error collection types used by the story aggregate,
the estimation policy and the workflow engine, kept here to avoid circular
imports.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single validation failure attached to a story field."""
    field: str  # "title", "estimate", "requested_by", ...
    message: str  # Human-readable, e.g. "can't be blank"
    kind: str = "invalid"  # "blank", "inclusion", "not_member", "not_in_scale", ...


class Errors:
    """Ordered collection of field errors.

    Multiple errors may be recorded for the same field. Indexing by field name
    returns the list of messages for that field (empty when none).
    """

    def __init__(self, items: list[FieldError] | None = None):
        self._items: list[FieldError] = list(items or [])

    def add(self, field: str, message: str, kind: str = "invalid") -> None:
        self._items.append(FieldError(field, message, kind))

    def extend(self, items) -> None:
        for item in items:
            self._items.append(item)

    def __getitem__(self, field: str) -> list[str]:
        return [e.message for e in self._items if e.field == field]

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, field: str) -> bool:
        return any(e.field == field for e in self._items)

    def kinds(self, field: str) -> list[str]:
        return [e.kind for e in self._items if e.field == field]

    def full_messages(self) -> list[str]:
        """Messages prefixed with a readable field name ("Title can't be blank")."""
        return [f"{e.field.replace('_', ' ').capitalize()} {e.message}" for e in self._items]

    def to_dict(self) -> dict[str, list[str]]:
        result: dict[str, list[str]] = {}
        for e in self._items:
            result.setdefault(e.field, []).append(e.message)
        return result

    def __repr__(self) -> str:
        return f"Errors({self.to_dict()!r})"
