"""
Attribute schema tests - system fields, visibility and validation rules.
"""

import pytest

from callboard.core.schema import PRIVATE, PUBLIC, Field, Presence, Schema


def agent_like_schema():
    return Schema([
        Field("name", validations=[Presence("Name is required!")]),
        Field("status"),
        Field("groupId", validations=[Presence("Group-Id is required!")]),
    ])


class TestSchemaFields:
    """Test field ordering and visibility."""

    def test_system_fields_wrap_declared_fields(self):
        schema = agent_like_schema()
        assert schema.names == ["id", "name", "status", "groupId", "createdAt", "updatedAt"]

    def test_system_fields_are_private(self):
        schema = agent_like_schema()
        for name in ("id", "createdAt", "updatedAt"):
            assert schema.is_private(name)
            assert schema.visibility[name] == PRIVATE
        assert schema.visibility["name"] == PUBLIC
        assert schema.public_names == ["name", "status", "groupId"]

    def test_empty_schema_only_has_system_fields(self):
        assert Schema().names == ["id", "createdAt", "updatedAt"]

    def test_duplicate_field_is_rejected(self):
        with pytest.raises(ValueError, match="'name' is declared more than once"):
            Schema([Field("name"), Field("name")])

    def test_redeclaring_a_system_field_is_rejected(self):
        with pytest.raises(ValueError, match="'id' is declared more than once"):
            Schema([Field("id")])

    def test_unknown_visibility_is_rejected(self):
        with pytest.raises(ValueError, match="Invalid visibility"):
            Field("name", visibility="hidden")

    def test_membership(self):
        schema = agent_like_schema()
        assert "groupId" in schema
        assert "zip" not in schema


class TestPresence:
    """Test the presence rule."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_missing_values_fail(self, value):
        assert Presence("required").check(value) == "required"

    @pytest.mark.parametrize("value", ["x", 0, 42, ["a"], False])
    def test_present_values_pass(self, value):
        assert Presence("required").check(value) is None


class TestSchemaValidation:
    """Test that validation collects every failing field."""

    def test_all_failing_fields_are_reported(self):
        errors = agent_like_schema().validate({"status": "free"})
        assert errors == {"name": ["Name is required!"], "groupId": ["Group-Id is required!"]}

    def test_valid_values_report_nothing(self):
        assert agent_like_schema().validate({"name": "a", "groupId": "1"}) == {}

    def test_every_rule_of_a_field_reports(self):
        schema = Schema([Field("name", validations=[Presence("first"), Presence("second")])])
        assert schema.validate({}) == {"name": ["first", "second"]}
