"""Tests for storyflow.lib.validate module."""

import pytest

from storyflow.lib.validate import SchemaValidationError, validate, validate_view
from storyflow.pm.models import Project, Story, User


class TestValidate:
    """Tests for validate() against named schemas."""

    def test_valid_point_scales_config(self):
        validate({"default_point_scale": "linear", "point_scales": {"tshirt": [1, 2]}}, "point_scales")

    def test_invalid_point_scales_config(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate({"point_scales": {"tshirt": []}}, "point_scales")
        assert exc_info.value.schema_name == "point_scales"
        assert exc_info.value.path == "point_scales.tshirt"

    def test_missing_schema(self):
        with pytest.raises(SchemaValidationError, match="Schema file not found"):
            validate({}, "nonexistent")


class TestValidateView:
    """Tests for validate_view()."""

    @pytest.fixture
    def story(self):
        user = User(id=1, name="Ann")
        project = Project(id=1, users=[user])
        return Story(title="Login", project=project, requested_by=user, position=1, id=1)

    def test_valid_story_view(self, story):
        validate_view(story.as_view())

    def test_invalid_story_view_still_conforms(self, story):
        story.title = ""
        story.state = "flum"
        story.project = None
        validate_view(story.as_view())

    def test_extra_field_rejected(self, story):
        view = story.as_view()
        view["colour"] = "blue"
        with pytest.raises(SchemaValidationError):
            validate_view(view)

    def test_missing_field_rejected(self, story):
        view = story.as_view()
        del view["events"]
        with pytest.raises(SchemaValidationError):
            validate_view(view)

    def test_reports_every_problem(self, story):
        view = story.as_view()
        view["estimate"] = "big"
        view["estimable"] = "yes"
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_view(view)
        paths = [path for path, _ in exc_info.value.problems]
        assert paths == ["estimable", "estimate"]


class TestAsJson:
    """Tests for the schema check in Story.as_json()."""

    def test_as_json_checks_view(self):
        user = User(id=1)
        story = Story(title="Login", project=Project(id=1, users=[user]), requested_by=user)
        assert story.as_json()["story"]["title"] == "Login"

    def test_as_json_rejects_unserialisable_estimate(self):
        user = User(id=1)
        story = Story(title="Login", project=Project(id=1, users=[user]), requested_by=user)
        story.estimate = "big"
        with pytest.raises(SchemaValidationError) as exc_info:
            story.as_json()
        assert exc_info.value.schema_name == "story"
