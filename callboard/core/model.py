"""
The model engine every entity type is built on.

An entity type declares a ``schema`` and optionally ``hooks``; the engine provides
attribute access, validation, dirty-tracking, persistence and equality queries::

    class Agent(Model):
        schema = Schema([
            Field("name", validations=[Presence("Name is required!")]),
            Field("status"),
        ])

    agent = await Agent.create({"name": "foo"})
    agents = await Agent.where({"status": "free"})

All operations are coroutines. A failing operation raises a ``ModelError``.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .errors import (
    ConcurrencyConflict,
    InvalidArguments,
    NotFound,
    PersistenceFailed,
    ValidationFailed,
)
from .schema import SYSTEM_FIELDS, Schema
from .store import ID_KEY, META_KEY, Collection
from ..util.logging import logger, summarize_errors

Hook = Callable[["Model"], Awaitable[None]]

# Plain instance attributes a field must not shadow
_INSTANCE_STATE = ("_values", "old_values", "errors", "is_valid")


@dataclass(frozen=True)
class ModelHooks:
    """Coroutines run after a successful create or destroy of an entity."""
    after_create: Optional[Hook] = None
    after_destroy: Optional[Hook] = None


class FieldAccessor:
    """Exposes one schema field as an attribute of entity instances."""

    def __init__(self, name: str, private: bool):
        self.name = name
        self.private = private

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance._values.get(self.name)

    def __set__(self, instance, value):
        # Private fields only change through deserialize_attributes
        if self.private:
            return
        instance._values[self.name] = value


def from_timestamp_ms(value: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime without float rounding."""
    return datetime.fromtimestamp(value // 1000, tz=timezone.utc) + timedelta(milliseconds=value % 1000)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Read a datetime, an ISO-8601 string or epoch milliseconds. None if unreadable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        return from_timestamp_ms(int(value))
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def comparable(value: Any) -> Optional[str]:
    """Normalise a value for equality queries.

    None stays None, booleans become "true"/"false", datetimes become UTC
    ISO-8601, integral floats lose their fraction and everything else is
    compared by its string form.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Model:
    """Generic persistence and validation engine, parametrised by ``schema`` and ``hooks``."""

    schema: Schema = Schema()
    hooks: ModelHooks = ModelHooks()

    _db = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        for name in cls.schema.names:
            existing = getattr(cls, name, None)
            if name in _INSTANCE_STATE or (existing is not None and not isinstance(existing, FieldAccessor)):
                raise TypeError(f"Field '{name}' of {cls.__name__} collides with a model attribute.")
            setattr(cls, name, FieldAccessor(name, cls.schema.is_private(name)))

    def __init__(self, args: Optional[Mapping] = None, use_private: bool = False):
        if args is None:
            args = {}
        if not isinstance(args, Mapping):
            raise TypeError(f"{self.model_name()} expects its arguments given as a JSON-object.")

        self._values: Dict[str, Any] = {name: None for name in self.schema.names}
        self.old_values: Dict[str, Any] = {}
        self.errors: Dict[str, List[str]] = {}
        self.is_valid: Optional[bool] = None

        self.deserialize_attributes(args, use_private)

    def __repr__(self):
        return f"<{self.model_name()} id={self.id!r}>"

    # Store binding

    @staticmethod
    def bind(db):
        """Attach the database all entity types read from and write to.

        There is a single binding per process, shared by every entity type.
        Binding again replaces it.
        """
        Model._db = db

    @staticmethod
    def unbind():
        Model._db = None

    @classmethod
    def collection(cls) -> Collection:
        if Model._db is None:
            raise RuntimeError("No database bound to models. Call init_db() first.")
        return Model._db.collection(cls.model_name())

    @classmethod
    def model_name(cls) -> str:
        return cls.__name__

    # State

    @property
    def attributes(self) -> List[str]:
        return self.schema.names

    @property
    def is_new(self) -> bool:
        """True until the store has assigned an id."""
        return not self.id

    @property
    def is_dirty(self) -> bool:
        """True if attribute values differ from the last load or save."""
        return self.serialize_attributes() != self.old_values

    @property
    def attribute_changes(self) -> List[Dict[str, Any]]:
        current_values = self.serialize_attributes()
        return [
            {"key": key, "oldValue": self.old_values.get(key), "currentValue": value}
            for key, value in current_values.items()
            if value != self.old_values.get(key)
        ]

    def serialize_attributes(self, without_private: bool = False) -> Dict[str, Any]:
        """Return the attribute values as a JSON-object."""
        values = {name: copy.deepcopy(self._values[name]) for name in self.schema.names}

        if without_private:
            for name in SYSTEM_FIELDS:
                values.pop(name, None)

        return values

    def deserialize_attributes(self, attributes: Mapping, use_private: bool = False):
        """Set attributes from a JSON-object and take a new snapshot of the values.

        Private attributes are only taken over with ``use_private``, which is
        meant for data coming from the store.
        """
        for name in self.schema.names:
            if name not in attributes:
                continue
            if self.schema.is_private(name) and not use_private:
                continue
            self._values[name] = copy.deepcopy(attributes[name])

        self.old_values = self.serialize_attributes()

    # Instance operations

    async def validate(self) -> "Model":
        """Check every field against its rules, failing with all violations at once."""
        self.errors = self.schema.validate(self._values)
        self.is_valid = not self.errors

        if not self.is_valid:
            logger.log_model_operation(self.model_name(), "validate", self.id, "failed",
                                       {"errors": summarize_errors(self.errors)})
            raise ValidationFailed(self.errors)

        return self

    async def save(self) -> "Model":
        """Validate and write the instance to the store, then reload it from there."""
        await self.validate()

        collection = self.collection()
        attributes_to_store = self.serialize_attributes(without_private=True)

        if self.is_new:
            stored = collection.insert(attributes_to_store)
        else:
            stored = collection.get(self.id)
            if stored is None:
                raise NotFound(f"{self.model_name()} doesn't exist in store anymore.")
            stored.update(attributes_to_store)
            stored = collection.update(stored)

        # The store must hand back exactly what was written
        written = all(stored.get(name) == value for name, value in attributes_to_store.items())

        self.deserialize_attributes(self._map_meta_data(stored), use_private=True)

        if self.is_new or not written:
            logger.log_model_operation(self.model_name(), "save", self.id, "failed")
            raise PersistenceFailed()

        return self

    async def update(self, args: Optional[Mapping] = None) -> "Model":
        """Apply the given public attributes and save.

        Falsy values (empty string, 0, None, False, empty lists and mappings) are
        skipped rather than applied, so an update cannot clear a field or set it
        to an empty container. An ``updatedAt`` older than the stored
        one means the caller's copy is stale and the update is refused.
        """
        if args is not None and not isinstance(args, Mapping):
            raise InvalidArguments("Arguments given to update model are not a valid JSON-object")

        if not args:
            return self

        given_timestamp = parse_timestamp(args.get("updatedAt")) if args.get("updatedAt") else None
        if given_timestamp is not None and self.updatedAt is not None and given_timestamp < self.updatedAt:
            logger.log_model_operation(self.model_name(), "update", self.id, "failed", {"reason": "stale"})
            raise ConcurrencyConflict()

        for name in self.schema.public_names:
            if args.get(name):
                setattr(self, name, args[name])

        await self.save()
        logger.log_model_operation(self.model_name(), "update", self.id)
        return self

    async def destroy(self):
        """Remove the instance's record from the store."""
        collection = self.collection()
        stored = collection.get(self.id) if self.id else None

        if stored is None:
            raise NotFound(f"{self.model_name()} doesn't exist in store anymore.")

        collection.remove(stored)
        logger.log_model_operation(self.model_name(), "destroy", self.id)

        if self.hooks.after_destroy is not None:
            await self.hooks.after_destroy(self)

    # Type-level operations

    @classmethod
    async def create(cls, args: Optional[Mapping] = None) -> "Model":
        """Build an instance from the given attributes and save it."""
        if args is not None and not isinstance(args, Mapping):
            raise InvalidArguments(f"Arguments given to create {cls.model_name()} are not a valid JSON-object.")

        instance = cls(args)
        await instance.save()
        logger.log_model_operation(cls.model_name(), "create", instance.id)

        if cls.hooks.after_create is not None:
            await cls.hooks.after_create(instance)

        return instance

    @classmethod
    async def find(cls, record_id: Any) -> "Model":
        """Load the instance stored under the given id."""
        if not cls._is_positive_integer(record_id):
            raise InvalidArguments(f"No valid id given to find {cls.model_name()}.")

        stored = cls.collection().get(int(record_id))

        if stored is None:
            raise NotFound(f"No {cls.model_name()} found for id {record_id}.")

        return cls._from_store(stored)

    @classmethod
    async def all(cls) -> List["Model"]:
        """Load every stored instance of this type."""
        return [cls._from_store(stored) for stored in cls.collection().records()]

    @classmethod
    async def where(cls, query_params: Optional[Mapping]) -> List["Model"]:
        """Load every stored instance whose attributes equal the given values.

        Values are compared after normalising both sides with ``comparable``,
        so ``2342`` matches ``"2342"``.
        """
        if query_params is None:
            raise InvalidArguments(f"No params given to find instances of {cls.model_name()}.")

        if not isinstance(query_params, Mapping):
            raise InvalidArguments(f"Params given to find instances of {cls.model_name()} are not a valid JSON-object.")

        invalid_attributes = [key for key in query_params if key not in cls.schema]

        if invalid_attributes:
            raise InvalidArguments(
                f"Parameters given are not valid attributes of {cls.model_name()}: {', '.join(map(str, invalid_attributes))}."
            )

        wanted = {key: comparable(cls._query_value(key, value)) for key, value in query_params.items()}

        def matches(record):
            view = cls._map_meta_data(record)
            return all(comparable(view.get(key)) == value for key, value in wanted.items())

        return [cls._from_store(stored) for stored in cls.collection().scan(matches)]

    @staticmethod
    def _query_value(key: str, value: Any) -> Any:
        """Read timestamp queries given as ISO strings as datetimes."""
        if key in ("createdAt", "updatedAt") and isinstance(value, str):
            parsed = parse_timestamp(value)
            if parsed is not None:
                return parsed
        return value

    @classmethod
    def _from_store(cls, stored: Mapping) -> "Model":
        return cls(cls._map_meta_data(stored), use_private=True)

    @staticmethod
    def _is_positive_integer(value: Any) -> bool:
        """Check an id in numeric or string form, rejecting 0, negatives and non-canonical text."""
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return value > 0
        if isinstance(value, float):
            return value.is_integer() and value > 0
        if isinstance(value, str):
            return value.isdigit() and value.isascii() and str(int(value)) == value and int(value) > 0
        return False

    @staticmethod
    def _map_meta_data(stored: Mapping) -> Dict[str, Any]:
        """Expose store metadata as the id and timestamp attributes."""
        view = {k: v for k, v in stored.items() if k not in (ID_KEY, META_KEY)}
        meta = stored.get(META_KEY) or {}

        view["id"] = stored.get(ID_KEY)
        if meta.get("created") is not None:
            view["createdAt"] = from_timestamp_ms(meta["created"])
            view["updatedAt"] = from_timestamp_ms(meta.get("updated") or meta["created"])
        return view
