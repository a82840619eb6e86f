"""
Tier configuration models: the structural schema of the tier document.
"""

from typing import Literal

from pydantic import BaseModel, Field, PrivateAttr, field_validator

TierName = Literal["core", "high_frequency", "optional", "specialized"]
ValidationType = Literal["number", "boolean", "string", "enum", "monetary"]

CORE = "core"
HIGH_FREQUENCY = "high_frequency"
OPTIONAL = "optional"
SPECIALIZED = "specialized"

# Closed set, in strictness order
TIER_NAMES: tuple[str, ...] = (CORE, HIGH_FREQUENCY, OPTIONAL, SPECIALIZED)


class TierDefinition(BaseModel):
    """
    One strictness tier.

    Attributes:
        description: Human description of the tier
        ui_behavior: Presentation hint, not used by validation
        validation_requirement: Human summary of the validation policy
        strict_validation: Core tier only: stop after core errors
        required: Whether properties of this tier must be present
    """

    description: str
    ui_behavior: str = ""
    validation_requirement: str = ""
    strict_validation: bool
    required: bool

    class Config:
        frozen = True


class PropertyMetadata(BaseModel):
    """
    Metadata for one canonical property.

    Attributes:
        tier: Tier the property belongs to
        validation_type: Expected primitive type (``validationType`` in the document)
        frequency: Observed prevalence in source data, informational only
        synthetic: Property invented for bookkeeping, not from the source schema
        description: Optional human description
    """

    tier: TierName
    validation_type: ValidationType = Field(..., alias="validationType")
    frequency: int = Field(0, ge=0)
    synthetic: bool = False
    description: str | None = None

    class Config:
        frozen = True
        populate_by_name = True
        extra = "forbid"


class TierConfig(BaseModel):
    """
    Aggregate tier configuration, immutable once loaded.

    Lookup indexes (core property set) are derived at construction time so
    that validation never scans the property map.
    """

    version: str = Field(..., min_length=1)
    generated_at: str | None = None
    source: str | None = None
    tiers: dict[TierName, TierDefinition]
    properties: dict[str, PropertyMetadata]

    _core_properties: frozenset[str] = PrivateAttr(default=frozenset())

    class Config:
        frozen = True

    @field_validator("tiers")
    @classmethod
    def check_tier_set(cls, v):
        """Tier names must be exactly the four known tiers."""
        missing = [name for name in TIER_NAMES if name not in v]
        if missing:
            raise ValueError(f"missing tier definitions: {', '.join(missing)}")
        return v

    def model_post_init(self, __context) -> None:
        self._core_properties = frozenset(
            name for name, meta in self.properties.items() if meta.tier == CORE
        )

    @property
    def core_properties(self) -> frozenset[str]:
        return self._core_properties

    @property
    def core_strict(self) -> bool:
        return self.tiers[CORE].strict_validation

    def metadata_for(self, name: str) -> PropertyMetadata | None:
        return self.properties.get(name)

    def tier_of(self, name: str) -> str:
        """Tier of a property; unknown properties fold into ``specialized``."""
        meta = self.properties.get(name)
        return meta.tier if meta is not None else SPECIALIZED

    def tier_statistics(self) -> dict[str, dict[str, int]]:
        """
        Count properties per tier.

        Returns:
            tier -> {"total", "synthetic", "sourced"}
        """
        stats = {name: {"total": 0, "synthetic": 0, "sourced": 0} for name in TIER_NAMES}
        for meta in self.properties.values():
            bucket = stats[meta.tier]
            bucket["total"] += 1
            if meta.synthetic:
                bucket["synthetic"] += 1
            else:
                bucket["sourced"] += 1
        return stats
