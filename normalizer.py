"""Schema-driven normalization of MBS items.

Public API
----------
discover_field_union(items)            -> frozenset[str]
check_required_fields(index, record)   -> RecordRejection | None
normalize_record(record, field_union)  -> dict
normalize_items(items)                 -> NormalizationResult
normalize_document(document)           -> NormalizationResult
denormalize_record(record)             -> dict[str, str]
serialize_record_set(record_set)       -> str

The field union is taken from every object entry, including entries that are
later rejected, so a field seen only on a rejected entry still appears
(defaulted) on every kept record.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from coercion import coerce_field, raw_text, to_raw_text
from field_schema import required_fields, type_of
from models import (
    ITEMS_COLLECTION,
    NormalizationReport,
    NormalizationResult,
    NormalizedRecordSet,
    RecordRejection,
)


class StructuralError(ValueError):
    """Input cannot be normalized at all; no output is produced."""


def discover_field_union(items: Iterable[Any]) -> frozenset[str]:
    fields: set[str] = set()
    for item in items:
        if isinstance(item, Mapping):
            fields.update(item.keys())
    return frozenset(fields)


def check_required_fields(index: int, record: Mapping[str, Any]) -> RecordRejection | None:
    """Return the first required-field failure for a record, or None if it is valid."""
    for field in required_fields():
        if field not in record:
            return RecordRejection(index, field, "missing required field")
        value = record[field]
        if not isinstance(value, str):
            return RecordRejection(index, field, "required field is not a string")
        if not value:
            return RecordRejection(index, field, "required field is empty")
    return None


def normalize_record(record: Mapping[str, Any], field_union: Iterable[str]) -> dict[str, Any]:
    """Build a typed record carrying every field of the union."""
    return {
        field: coerce_field(field, raw_text(record[field]) if field in record else "")
        for field in field_union
    }


def normalize_items(items: Any) -> NormalizationResult:
    """Validate and normalize a list of raw items.

    Raises StructuralError when ``items`` is not a list or is empty. Entries
    failing the required-field check, and entries that are not objects, are
    reported in the result and left out of the record set.
    """
    if not isinstance(items, list):
        raise StructuralError(f"{ITEMS_COLLECTION} is not an array or is missing")
    if not items:
        raise StructuralError(f"{ITEMS_COLLECTION} array is empty")

    field_union = discover_field_union(items)

    records: list[dict[str, Any]] = []
    rejections: list[RecordRejection] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            rejections.append(RecordRejection(index, None, "not an object"))
            continue

        rejection = check_required_fields(index, item)
        if rejection is not None:
            rejections.append(rejection)
            continue

        records.append(normalize_record(item, field_union))

    report = NormalizationReport(
        total=len(items),
        kept=len(records),
        field_union=field_union,
        rejections=tuple(rejections),
    )
    return NormalizationResult(NormalizedRecordSet(tuple(records)), report)


def normalize_document(document: Any) -> NormalizationResult:
    if not isinstance(document, Mapping):
        raise StructuralError("document is not an object")
    return normalize_items(document.get(ITEMS_COLLECTION))


def denormalize_record(record: Mapping[str, Any]) -> dict[str, str]:
    """Render a normalized record back into source text values."""
    return {field: to_raw_text(type_of(field), value) for field, value in record.items()}


def serialize_record_set(record_set: NormalizedRecordSet, indent: int = 2) -> str:
    return json.dumps(record_set.to_document(), indent=indent, ensure_ascii=False) + "\n"
