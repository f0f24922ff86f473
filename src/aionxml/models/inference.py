"""Per-column schema hypotheses produced by the inference engine."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class FieldType(StrEnum):
    ID = "Id"
    BOOLEAN = "Boolean"
    ENUM = "Enum"
    NUMERIC = "Numeric"
    STRING = "String"
    UNKNOWN = "Unknown"


class SlotCategory(StrEnum):
    GENERIC = "Generic"
    PHYSICAL = "Physical"
    MAGICAL = "Magical"


class ValueDomainKind(StrEnum):
    NUMERIC = "Numeric"
    ENUM = "Enum"
    MIXED = "Mixed"


class InferenceResult(BaseModel):
    """Name- or value-based field type guess."""

    field_type: FieldType = FieldType.UNKNOWN
    confidence: int = Field(default=0, ge=0, le=100)


class ReferenceDetectionResult(BaseModel):
    """Whether a field is a foreign reference, and to what."""

    is_reference: bool = False
    target_table_name: Optional[str] = None
    target_field_name: Optional[str] = None
    target_mechanism_code: Optional[str] = None
    confidence: int = Field(default=0, ge=0, le=100)

    @model_validator(mode="after")
    def _targets_only_for_references(self) -> ReferenceDetectionResult:
        has_target = self.target_table_name is not None or self.target_field_name is not None
        if self.is_reference and not (self.target_table_name and self.target_field_name):
            raise ValueError("a reference needs both target_table_name and target_field_name")
        if not self.is_reference and has_target:
            raise ValueError("targets are only set on references")
        return self


class SlotInfo(BaseModel):
    """Position of a field inside a repeated bonus-attribute slot family."""

    category: SlotCategory = SlotCategory.GENERIC
    slot_index: int = Field(ge=1)
    group: Optional[str] = None  # lettered sub-family: bonus_attr_a1 -> "a"

    @property
    def slot_key(self) -> str:
        return f"slot_{self.group or ''}{self.slot_index}"


class BonusAttrValue(BaseModel):
    """One parsed "<attr_code> <number>" slot value."""

    attr_code: str
    value: float
    raw_value: str = ""
    slot_name: Optional[str] = None


class AttrRange(BaseModel):
    min: float
    max: float
    avg: float
    count: int = 0


class ValueDomainStatistics(BaseModel):
    """Statistical shape of one column's observed values."""

    field_id: int
    kind: ValueDomainKind = ValueDomainKind.MIXED
    distinct_count: int = 0
    sample_size: int = 0
    null_count: int = 0
    distinct_rate: float = 0.0
    numeric_range: Optional[tuple[float, float]] = None
    all_integer: bool = False
    mean: Optional[float] = None
    frequency_table: Optional[dict[str, int]] = None
    top_values: dict[str, int] = Field(default_factory=dict)


class ColumnHypotheses(BaseModel):
    """Independent, unmerged hypotheses for one column."""

    field_id: int
    field_name: str
    field_type: InferenceResult
    reference: ReferenceDetectionResult
    slot: Optional[SlotInfo] = None
    value_domain: ValueDomainStatistics


class BonusAttrSummary(BaseModel):
    """Attribute usage and value ranges across a set of parsed slot values."""

    total_values: int = 0
    distinct_attrs: int = 0
    usage: dict[str, int] = Field(default_factory=dict)
    ranges: dict[str, AttrRange] = Field(default_factory=dict)
