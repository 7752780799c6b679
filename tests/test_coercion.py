import pytest

from coercion import coerce_field, coerce_value, raw_text, to_raw_text
from models import FieldType


@pytest.mark.parametrize("raw,expected", [
    ("Y", True),
    ("y", True),
    ("N", False),
    ("", False),
    (None, False),
    ("Yes", False),
])
def test_boolean_coercion(raw: str | None, expected: bool) -> None:
    assert coerce_value(FieldType.BOOLEAN, raw) is expected


@pytest.mark.parametrize("raw,expected", [
    ("05.03.2024", "2024-03-05"),
    ("31.12.1999", "1999-12-31"),
    ("2024-03-05", None),
    ("5.3.2024", None),
    ("31.02.2024", None),
    ("05.03.2024 ", None),
    ("", None),
    (None, None),
])
def test_date_coercion(raw: str | None, expected: str | None) -> None:
    assert coerce_value(FieldType.DATE, raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("12.50", 12.5),
    ("0", 0.0),
    ("-3.25", -3.25),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("abc", 0.0),
    ("12.5\n", 0.0),
    ("inf", 0.0),
    ("nan", 0.0),
    ("", 0.0),
    (None, 0.0),
])
def test_numeric_coercion(raw: str | None, expected: float) -> None:
    result = coerce_value(FieldType.NUMERIC, raw)
    assert isinstance(result, float)
    assert result == expected


def test_string_passes_through_unchanged() -> None:
    assert coerce_value(FieldType.STRING, "  Professional attendance ") == "  Professional attendance "
    assert coerce_value(FieldType.STRING, None) == ""


def test_coerce_field_uses_schema_and_defaults_unknown_to_string() -> None:
    assert coerce_field("ScheduleFee", "41.20") == 41.2
    assert coerce_field("NewItem", "Y") is True
    assert coerce_field("ItemStartDate", "01.11.2023") == "2023-11-01"
    assert coerce_field("SomethingNew", "01.11.2023") == "01.11.2023"


def test_raw_text_renders_non_strings() -> None:
    assert raw_text(None) == ""
    assert raw_text("abc") == "abc"
    assert raw_text(12) == "12"
    assert raw_text({"-code": "A"}) == '{"-code":"A"}'


@pytest.mark.parametrize("field_type,value", [
    (FieldType.BOOLEAN, True),
    (FieldType.BOOLEAN, False),
    (FieldType.DATE, "2024-03-05"),
    (FieldType.DATE, "0999-01-02"),
    (FieldType.DATE, None),
    (FieldType.NUMERIC, 12.5),
    (FieldType.NUMERIC, 0.0),
    (FieldType.NUMERIC, 1e20),
    (FieldType.STRING, "Category 1"),
])
def test_to_raw_text_is_inverse_of_coercion(field_type: FieldType, value) -> None:
    assert coerce_value(field_type, to_raw_text(field_type, value)) == value
