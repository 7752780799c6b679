"""Shared typed models for the MBS sync pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

# Top-level key of the document handed to downstream consumers.
ITEMS_COLLECTION = "MBS_Items"


class FieldType(Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    NUMERIC = "numeric"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declared type and requirement for one MBS field."""

    name: str
    field_type: FieldType
    required: bool = False


@dataclass(frozen=True, slots=True)
class RecordRejection:
    """Why one raw entry was left out of the normalized output."""

    index: int
    field: str | None  # None when the entry was not an object at all
    reason: str


@dataclass(frozen=True, slots=True)
class NormalizationReport:
    """Diagnostics from one normalization run."""

    total: int
    kept: int
    field_union: frozenset[str]
    rejections: tuple[RecordRejection, ...] = ()

    @property
    def dropped(self) -> int:
        return self.total - self.kept


@dataclass(frozen=True, slots=True)
class NormalizedRecordSet:
    """Ordered, validated records wrapped under a single collection name."""

    records: tuple[Mapping[str, Any], ...]
    collection: str = ITEMS_COLLECTION

    def __post_init__(self) -> None:
        # Records are read-only views over private copies.
        frozen = tuple(MappingProxyType(dict(record)) for record in self.records)
        object.__setattr__(self, "records", frozen)

    def __len__(self) -> int:
        return len(self.records)

    def to_document(self) -> dict[str, list[dict[str, Any]]]:
        return {self.collection: [dict(record) for record in self.records]}


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    record_set: NormalizedRecordSet
    report: NormalizationReport
