"""Field schema for MBS XML items.

The schema is open: any field not declared here is treated as an optional
string and passed through untouched.
"""

from __future__ import annotations

from types import MappingProxyType

from models import FieldSpec, FieldType

_REQUIRED_STRING_FIELDS = ("ItemNum", "Description")

# Y/N flags
_BOOLEAN_FIELDS = (
    "NewItem",
    "ItemChange",
    "FeeChange",
    "BenefitChange",
    "AnaesChange",
    "EMSNChange",
    "DescriptorChange",
    "Anaes",
)

# DD.MM.YYYY in the source XML
_DATE_FIELDS = (
    "ItemStartDate",
    "ItemEndDate",
    "FeeStartDate",
    "BenefitStartDate",
    "DescriptionStartDate",
    "EMSNStartDate",
    "EMSNEndDate",
    "QFEStartDate",
    "QFEEndDate",
    "DerivedFeeStartDate",
    "EMSNChangeDate",
)

# Monetary amounts, percentages and anaesthetic units
_NUMERIC_FIELDS = (
    "ScheduleFee",
    "DerivedFee",
    "Benefit75",
    "Benefit85",
    "Benefit100",
    "EMSNPercentageCap",
    "EMSNMaximumCap",
    "EMSNFixedCapAmount",
    "EMSNCap",
    "BasicUnits",
)

_OPTIONAL_STRING_FIELDS = (
    "Category",
    "Group",
    "SubGroup",
    "SubHeading",
    "ItemType",
    "SubItemNum",
    "BenefitType",
    "FeeType",
    "ProviderType",
    "EMSNDescription",
)


def _build_definitions() -> dict[str, FieldSpec]:
    specs = [FieldSpec(name, FieldType.STRING, required=True) for name in _REQUIRED_STRING_FIELDS]
    specs += [FieldSpec(name, FieldType.BOOLEAN) for name in _BOOLEAN_FIELDS]
    specs += [FieldSpec(name, FieldType.DATE) for name in _DATE_FIELDS]
    specs += [FieldSpec(name, FieldType.NUMERIC) for name in _NUMERIC_FIELDS]
    specs += [FieldSpec(name, FieldType.STRING) for name in _OPTIONAL_STRING_FIELDS]
    return {spec.name: spec for spec in specs}


FIELD_DEFINITIONS: MappingProxyType[str, FieldSpec] = MappingProxyType(_build_definitions())

_REQUIRED: tuple[str, ...] = tuple(name for name, spec in FIELD_DEFINITIONS.items() if spec.required)


def type_of(field_name: str) -> FieldType:
    """Return the declared type of a field, STRING when undeclared."""
    spec = FIELD_DEFINITIONS.get(field_name)
    return spec.field_type if spec is not None else FieldType.STRING


def is_required(field_name: str) -> bool:
    spec = FIELD_DEFINITIONS.get(field_name)
    return spec.required if spec is not None else False


def required_fields() -> tuple[str, ...]:
    """Required field names in declaration order."""
    return _REQUIRED
