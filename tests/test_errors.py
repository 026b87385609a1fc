"""
Error descriptor tests - the serialized shape is the wire contract of the API.
"""

import pytest

from callboard.core.errors import (
    ConcurrencyConflict,
    ErrorDescriptor,
    InvalidArguments,
    ModelError,
    NotFound,
    PersistenceFailed,
    ValidationFailed,
)


class TestErrorDescriptor:
    """Test construction and serialization of error descriptors."""

    def test_title_only_serializes_to_one_element(self):
        descriptor = ErrorDescriptor("Something went wrong.")
        assert descriptor.title == "Something went wrong."
        assert descriptor.errors is None
        assert descriptor.serialize() == [{"title": "Something went wrong."}]

    def test_title_and_errors_serialize_to_two_elements(self):
        errors = {"name": ["Name is required!"]}
        descriptor = ErrorDescriptor("Validation failed.", errors)
        assert descriptor.serialize() == [{"title": "Validation failed."}, {"name": ["Name is required!"]}]

    @pytest.mark.parametrize("title", [None, "", 42, ["title"]])
    def test_missing_or_non_string_title_is_rejected(self, title):
        with pytest.raises(TypeError, match="requires at least a title given as string"):
            ErrorDescriptor(title)

    @pytest.mark.parametrize("errors", [["name"], "name", 7])
    def test_errors_must_be_an_object(self, errors):
        with pytest.raises(TypeError, match="expects errors given to be a JSON-object"):
            ErrorDescriptor("Validation failed.", errors)

    def test_empty_errors_object_is_kept(self):
        assert ErrorDescriptor("Validation failed.", {}).serialize() == [{"title": "Validation failed."}, {}]


class TestModelErrors:
    """Test the exception taxonomy carries descriptors."""

    def test_validation_failed_carries_field_errors(self):
        error = ValidationFailed({"groupId": ["Group-Id is required!"]})
        assert isinstance(error, ModelError)
        assert error.serialize() == [{"title": "Validation failed."}, {"groupId": ["Group-Id is required!"]}]

    def test_concurrency_conflict_is_a_single_title_descriptor(self):
        error = ConcurrencyConflict()
        assert error.serialize() == [
            {"title": "Model in store was updated meanwhile. Please reload model and try again."}
        ]

    def test_persistence_failed_title(self):
        assert PersistenceFailed().title == "Saving failed."

    def test_message_is_exception_text(self):
        error = NotFound("No Agent found for id 3.")
        assert str(error) == "No Agent found for id 3."
        assert error.errors is None

    def test_invalid_arguments_is_a_model_error(self):
        with pytest.raises(ModelError):
            raise InvalidArguments("No valid id given to find Agent.")
