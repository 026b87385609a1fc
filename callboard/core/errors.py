"""
Error descriptors and the exception taxonomy of the model layer.

Every failure an entity operation can report is a ``ModelError`` carrying an
``ErrorDescriptor``. The descriptor's serialized form is the JSON body the
route layer sends back, so its shape must not change::

    [{"title": "Validation failed."}, {"name": ["Name is required!"]}]
    [{"title": "No Agent found for id 7."}]
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional


class ErrorDescriptor:
    """Formats an error as required by the REST interface.

    Args:
        title: Non-empty description of the error
        errors: Optional mapping with details, e.g. field -> messages
    """

    def __init__(self, title: str, errors: Optional[Mapping] = None):
        if not title or not isinstance(title, str):
            raise TypeError("ErrorDescriptor requires at least a title given as string.")

        if errors is not None and not isinstance(errors, Mapping):
            raise TypeError("ErrorDescriptor expects errors given to be a JSON-object.")

        self._title = title
        self._errors = errors

    @property
    def title(self) -> str:
        return self._title

    @property
    def errors(self) -> Optional[Mapping]:
        return self._errors

    def serialize(self) -> List[Dict[str, Any]]:
        """Return the list of JSON-objects sent as response to invalid requests."""
        result = [{"title": self._title}]

        if self._errors is not None:
            result.append(dict(self._errors))

        return result

    def __repr__(self):
        return f"ErrorDescriptor({self._title!r}, {self._errors!r})"


class ModelError(Exception):
    """Base class of all failures reported by entity operations."""

    def __init__(self, title: str, errors: Optional[Mapping] = None):
        self.descriptor = ErrorDescriptor(title, errors)
        super().__init__(title)

    @property
    def title(self) -> str:
        return self.descriptor.title

    @property
    def errors(self) -> Optional[Mapping]:
        return self.descriptor.errors

    def serialize(self) -> List[Dict[str, Any]]:
        return self.descriptor.serialize()


class ValidationFailed(ModelError):
    """One or more fields violate their validation rules."""

    TITLE = "Validation failed."

    def __init__(self, errors: Mapping):
        super().__init__(self.TITLE, errors)


class NotFound(ModelError):
    """The requested record does not exist in the store."""


class InvalidArguments(ModelError):
    """Arguments given to an operation have the wrong shape or content."""


class ConcurrencyConflict(ModelError):
    """The record was updated in the store after the caller loaded it."""

    TITLE = "Model in store was updated meanwhile. Please reload model and try again."

    def __init__(self):
        super().__init__(self.TITLE)


class PersistenceFailed(ModelError):
    """The store did not persist what was written."""

    TITLE = "Saving failed."

    def __init__(self):
        super().__init__(self.TITLE)


class StoreError(Exception):
    """A collection was asked to touch a record it does not hold."""


class ConfigurationError(Exception):
    """The requested environment is not configured."""
