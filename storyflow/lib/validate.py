"""
Schema validation for storyflow.

Two boundaries are checked against JSON Schemas shipped in storyflow/schemas:
the storyflow.yaml configuration when it is read, and the story view when
Story.as_json hands it to the presentation layer. Every violation is reported,
not just the first.
"""

import json
from functools import lru_cache
from pathlib import Path

from jsonschema import Draft202012Validator

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class SchemaValidationError(Exception):
    """Data at a boundary does not match its schema.

    `problems` holds (path, message) pairs, path "(root)" for top-level ones.
    """

    def __init__(self, schema_name: str, problems: list[tuple[str, str]]):
        self.schema_name = schema_name
        self.problems = problems
        self.path = problems[0][0] if problems else None
        details = "; ".join(f"{message} at {path}" for path, message in problems)
        super().__init__(f"[{schema_name}] {details}")


@lru_cache(maxsize=None)
def get_validator(schema_name: str) -> Draft202012Validator:
    """Validator for storyflow/schemas/<schema_name>.schema.json."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise SchemaValidationError(schema_name, [("(root)", f"Schema file not found: {schema_path}")])
    schema = json.loads(schema_path.read_text())
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate(data, schema_name: str) -> None:
    """
    Validate data against a named schema.

    Args:
        data: Parsed document to check
        schema_name: "point_scales" or "story"

    Raises:
        SchemaValidationError: Listing every violation found
    """
    validator = get_validator(schema_name)
    problems = [
        (".".join(str(p) for p in e.absolute_path) or "(root)", e.message)
        for e in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))
    ]
    if problems:
        raise SchemaValidationError(schema_name, problems)


def validate_view(view: dict) -> None:
    """Check a story view against the story schema."""
    validate(view, "story")
