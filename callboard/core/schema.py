"""
Attribute schemas: field declarations, validation rules and visibility.
"""

from collections.abc import Mapping, Sized
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

PUBLIC = "public"
PRIVATE = "private"

# Managed by the store, never settable from outside
SYSTEM_FIELDS = ("id", "createdAt", "updatedAt")


@dataclass(frozen=True)
class Presence:
    """Rejects missing values: None, blank strings and empty containers."""
    message: str

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return self.message
        if isinstance(value, str):
            return self.message if not value.strip() else None
        if isinstance(value, Sized) and len(value) == 0:
            return self.message
        return None


@dataclass(frozen=True)
class Field:
    name: str
    validations: Tuple[Presence, ...] = ()
    visibility: str = PUBLIC

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError(f"Field name must be a non-empty string: {self.name!r}")
        if self.visibility not in (PUBLIC, PRIVATE):
            raise ValueError(f"Invalid visibility for field '{self.name}': {self.visibility}")
        # Accept lists for convenience, store as tuple to stay hashable
        object.__setattr__(self, "validations", tuple(self.validations))

    @property
    def is_private(self) -> bool:
        return self.visibility == PRIVATE


@dataclass
class Schema:
    """Ordered set of fields of one entity type.

    ``id`` is prepended and ``createdAt``/``updatedAt`` appended automatically,
    all three private. Declaring a name twice raises ``ValueError``.
    """
    declared: Iterable[Field] = ()
    fields: Tuple[Field, ...] = field(init=False)
    validations: Dict[str, Tuple[Presence, ...]] = field(init=False)
    visibility: Dict[str, str] = field(init=False)

    def __post_init__(self):
        fields = [Field("id", visibility=PRIVATE)]
        fields.extend(self.declared)
        fields.append(Field("createdAt", visibility=PRIVATE))
        fields.append(Field("updatedAt", visibility=PRIVATE))

        seen = set()
        for declared in fields:
            if declared.name in seen:
                raise ValueError(f"Attribute '{declared.name}' is declared more than once.")
            seen.add(declared.name)

        self.declared = tuple(self.declared)
        self.fields = tuple(fields)
        self.validations = {f.name: f.validations for f in fields}
        self.visibility = {f.name: f.visibility for f in fields}

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def public_names(self) -> List[str]:
        return [f.name for f in self.fields if not f.is_private]

    def is_private(self, name: str) -> bool:
        return self.visibility.get(name) == PRIVATE

    def __contains__(self, name: str) -> bool:
        return name in self.visibility

    def validate(self, values: Mapping) -> Dict[str, List[str]]:
        """Run every rule of every field, collecting messages per failing field."""
        errors = {}
        for name, rules in self.validations.items():
            messages = [msg for msg in (rule.check(values.get(name)) for rule in rules) if msg]
            if messages:
                errors[name] = messages
        return errors
