from collections import Counter

import pytest

import field_schema
from field_schema import FIELD_DEFINITIONS, is_required, required_fields, type_of
from models import FieldType


def test_schema_enumeration_counts() -> None:
    counts = Counter((spec.field_type, spec.required) for spec in FIELD_DEFINITIONS.values())
    assert counts[(FieldType.STRING, True)] == 2
    assert counts[(FieldType.BOOLEAN, False)] == 8
    assert counts[(FieldType.DATE, False)] == 11
    assert counts[(FieldType.NUMERIC, False)] == 10
    assert counts[(FieldType.STRING, False)] == 10
    assert sum(counts.values()) == len(FIELD_DEFINITIONS)


def test_required_fields_in_declaration_order() -> None:
    assert required_fields() == ("ItemNum", "Description")
    assert is_required("ItemNum") is True
    assert is_required("Category") is False


def test_undeclared_field_is_optional_string() -> None:
    assert type_of("BrandNewField") is FieldType.STRING
    assert is_required("BrandNewField") is False


def test_declared_types() -> None:
    assert type_of("Anaes") is FieldType.BOOLEAN
    assert type_of("EMSNChangeDate") is FieldType.DATE
    assert type_of("BasicUnits") is FieldType.NUMERIC
    assert type_of("SubItemNum") is FieldType.STRING


def test_schema_is_read_only() -> None:
    with pytest.raises(TypeError):
        field_schema.FIELD_DEFINITIONS["ItemNum"] = None  # type: ignore[index]
