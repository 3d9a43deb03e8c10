"""JSON export/import documents for any club collection.

An export is ``{"<collection>": [...], "generated_at": "<iso timestamp>"}``
plus optional extras (e.g. payment stats). An import accepts either that
object or a bare list, validates every record, and only then hands the list
back; malformed input is rejected as a whole, never partially applied.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence, Type, TypeVar

from pydantic import BaseModel

from libs.common.errors import ValidationError
from libs.db.repository import dump_records, parse_records

T = TypeVar("T", bound=BaseModel)


def export_document(
    collection: str,
    records: Sequence[BaseModel],
    *,
    generated_at: datetime,
    **extra: Any,
) -> dict:
    document = {collection: dump_records(records)}
    for name, value in extra.items():
        document[name] = value.model_dump(mode="json") if isinstance(value, BaseModel) else value
    document["generated_at"] = generated_at.isoformat()
    return document


def import_document(document: Any, collection: str, model: Type[T]) -> list[T]:
    if isinstance(document, list):
        raw = document
    elif isinstance(document, dict) and isinstance(document.get(collection), list):
        raw = document[collection]
    else:
        raise ValidationError(
            [f"expected a list or an object with a '{collection}' list"],
            prefix="Invalid import document",
        )
    return parse_records(collection, raw, model)
