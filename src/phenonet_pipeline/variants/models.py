"""Data models for variant target filtering."""

from enum import Enum

from pydantic import BaseModel, Field


class VariantType(str, Enum):
    """Functional class assigned to a variant by transcript annotation."""

    FS_DELETION = "FS_DELETION"
    FS_INSERTION = "FS_INSERTION"
    FS_SUBSTITUTION = "FS_SUBSTITUTION"
    FS_DUPLICATION = "FS_DUPLICATION"
    NON_FS_DELETION = "NON_FS_DELETION"
    NON_FS_INSERTION = "NON_FS_INSERTION"
    NON_FS_SUBSTITUTION = "NON_FS_SUBSTITUTION"
    NON_FS_DUPLICATION = "NON_FS_DUPLICATION"
    MISSENSE = "MISSENSE"
    SPLICING = "SPLICING"
    STOPGAIN = "STOPGAIN"
    STOPLOSS = "STOPLOSS"
    START_LOSS = "START_LOSS"
    NCRNA_EXONIC = "ncRNA_EXONIC"
    NCRNA_INTRONIC = "ncRNA_INTRONIC"
    NCRNA_SPLICING = "ncRNA_SPLICING"
    UTR3 = "UTR3"
    UTR5 = "UTR5"
    SYNONYMOUS = "SYNONYMOUS"
    INTRONIC = "INTRONIC"
    UPSTREAM = "UPSTREAM"
    DOWNSTREAM = "DOWNSTREAM"
    INTERGENIC = "INTERGENIC"
    ERROR = "ERROR"


# Intergenic or intronic but not in splice sequences
DEFAULT_OFF_TARGET_TYPES = frozenset({
    VariantType.DOWNSTREAM,
    VariantType.INTERGENIC,
    VariantType.INTRONIC,
    VariantType.NCRNA_INTRONIC,
    VariantType.SYNONYMOUS,
    VariantType.UPSTREAM,
    VariantType.ERROR,
})


class TargetFilterResult(BaseModel):
    """Summary of a target filter run.

    Attributes:
        before: Number of variants analysed
        after: Number of variants passing the filter
        type_counts: Variants seen per functional class, before filtering
        messages: Human-readable description of what was removed
    """

    before: int = Field(0, ge=0)
    after: int = Field(0, ge=0)
    type_counts: dict[str, int] = Field(default_factory=dict)
    messages: list[str] = Field(default_factory=list)

    @property
    def removed(self) -> int:
        return self.before - self.after
