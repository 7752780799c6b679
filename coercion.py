"""Coercion of raw MBS text values into their schema types.

Coercion is total: every input maps to some typed value. Unparseable dates
become None and unparseable numbers become 0.0.
"""

from __future__ import annotations

import json
import math
import re
from datetime import date, datetime
from typing import Any

from field_schema import type_of
from models import FieldType

_SOURCE_DATE_RE = re.compile(r"\d{2}\.\d{2}\.\d{4}")
_SOURCE_DATE_FORMAT = "%d.%m.%Y"
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_value(field_type: FieldType, raw: str | None) -> Any:
    """Convert one raw text value (or None for absent) to its typed form."""
    value = raw or ""

    if field_type is FieldType.BOOLEAN:
        return value.upper() == "Y"
    if field_type is FieldType.DATE:
        return _parse_source_date(value)
    if field_type is FieldType.NUMERIC:
        return _parse_decimal(value)
    return value


def coerce_field(field_name: str, raw: str | None) -> Any:
    return coerce_value(type_of(field_name), raw)


def raw_text(value: Any) -> str:
    """Render an arbitrary raw tree value as text before coercion."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def to_raw_text(field_type: FieldType, value: Any) -> str:
    """Render a typed value back into the source text format.

    coerce_value(field_type, to_raw_text(field_type, v)) == v for every value
    coerce_value can produce.
    """
    if value is None:
        return ""
    if field_type is FieldType.BOOLEAN:
        return "Y" if value else "N"
    if field_type is FieldType.DATE:
        parsed = date.fromisoformat(value)
        return f"{parsed.day:02d}.{parsed.month:02d}.{parsed.year:04d}"
    if field_type is FieldType.NUMERIC:
        return repr(float(value))
    return raw_text(value)


def _parse_source_date(value: str) -> str | None:
    # strptime alone would also accept single-digit days and months.
    if not _SOURCE_DATE_RE.fullmatch(value):
        return None
    try:
        parsed = datetime.strptime(value, _SOURCE_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.date().isoformat()


def _parse_decimal(value: str) -> float:
    if not _DECIMAL_RE.fullmatch(value):
        return 0.0
    number = float(value)
    return number if math.isfinite(number) else 0.0
