"""Typed repositories over the key-value store.

Persisted JSON is never trusted: every load goes through a pydantic
``TypeAdapter`` and malformed data raises ``PersistedDataError`` listing each
failing record and field, instead of yielding half-formed objects.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Generic, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from libs.common.errors import PersistedDataError, ValidationError
from libs.db.store import KeyValueStore

T = TypeVar("T", bound=BaseModel)


def describe_validation_error(exc: PydanticValidationError) -> list[str]:
    """Flatten a pydantic error into ``"0.amount: Input should be ..."`` lines."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "value"
        messages.append(f"{location}: {error['msg']}")
    return messages


def validate_input(model: Type[T], data: dict, prefix: str = "Invalid input") -> T:
    """Build a ``model`` from user input, reporting every failing field at once.

    ``None`` values are dropped first so a missing field reads as "Field required".
    """
    payload = {name: value for name, value in data.items() if value is not None}
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e), prefix=prefix) from e


def parse_records(key: str, raw: Any, model: Type[T]) -> list[T]:
    """Validate a JSON list of ``model`` records, all or nothing."""
    if not isinstance(raw, list):
        raise PersistedDataError(key, [f"expected a list, got {type(raw).__name__}"])
    try:
        records = TypeAdapter(list[model]).validate_python(raw)
    except PydanticValidationError as e:
        raise PersistedDataError(key, describe_validation_error(e)) from e

    if records and hasattr(records[0], "id"):
        duplicates = [i for i, n in Counter(r.id for r in records).items() if n > 1]
        if duplicates:
            raise PersistedDataError(
                key, [f"duplicate id {identifier}" for identifier in duplicates]
            )
    return records


def parse_document(key: str, raw: Any, model: Type[T]) -> T:
    if not isinstance(raw, dict):
        raise PersistedDataError(key, [f"expected an object, got {type(raw).__name__}"])
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise PersistedDataError(key, describe_validation_error(e)) from e


def dump_records(records: Sequence[BaseModel]) -> list[dict]:
    return [record.model_dump(mode="json") for record in records]


def _load_raw(store: KeyValueStore, key: str) -> Optional[Any]:
    try:
        return store.load(key)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        raise PersistedDataError(key, [f"not valid JSON: {e}"]) from e


class CollectionRepository(Generic[T]):
    """A list of ``model`` records stored under one key."""

    def __init__(self, store: KeyValueStore, key: str, model: Type[T]):
        self.store = store
        self.key = key
        self.model = model

    def load(self) -> list[T]:
        raw = _load_raw(self.store, self.key)
        if raw is None:
            return []
        return parse_records(self.key, raw, self.model)

    def save(self, records: Sequence[T]) -> None:
        self.store.save(self.key, dump_records(records))


class DocumentRepository(Generic[T]):
    """A single ``model`` object stored under one key."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        model: Type[T],
        default_factory: Callable[[], T],
    ):
        self.store = store
        self.key = key
        self.model = model
        self.default_factory = default_factory

    def load(self) -> T:
        raw = _load_raw(self.store, self.key)
        if raw is None:
            return self.default_factory()
        return parse_document(self.key, raw, self.model)

    def save(self, document: T) -> None:
        self.store.save(self.key, document.model_dump(mode="json"))
