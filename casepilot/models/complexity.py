"""Complexity score data models."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ComplexityLevel(str, Enum):
    """Ordered complexity levels."""

    TRIVIAL = "trivial"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"
    CRITICAL = "critical"

    @property
    def score_range(self) -> Tuple[int, Optional[int]]:
        """Inclusive (min, max) range; max is None for the open-ended level."""
        return LEVEL_RANGES[self]

    @property
    def rank(self) -> int:
        """Position of the level in ascending order."""
        return list(ComplexityLevel).index(self)

    @classmethod
    def from_score(cls, total: int) -> "ComplexityLevel":
        """Return the first level whose range contains ``total``."""
        for level in cls:
            low, high = LEVEL_RANGES[level]
            if total >= low and (high is None or total <= high):
                return level
        return cls.CRITICAL


LEVEL_RANGES: Dict[ComplexityLevel, Tuple[int, Optional[int]]] = {
    ComplexityLevel.TRIVIAL: (0, 10),
    ComplexityLevel.LOW: (11, 30),
    ComplexityLevel.MEDIUM: (31, 60),
    ComplexityLevel.HIGH: (61, 85),
    ComplexityLevel.VERY_HIGH: (86, 100),
    ComplexityLevel.CRITICAL: (101, None),
}

DIMENSIONS = (
    "parameter",
    "response",
    "security",
    "business_logic",
    "data_structure",
    "error_handling",
)


class ComplexityScore(BaseModel):
    """Six-dimension complexity score of an endpoint."""

    model_config = ConfigDict(frozen=True)

    parameter: int = Field(default=0, ge=0)
    response: int = Field(default=0, ge=0)
    security: int = Field(default=0, ge=0)
    business_logic: int = Field(default=0, ge=0)
    data_structure: int = Field(default=0, ge=0)
    error_handling: int = Field(default=0, ge=0)

    total: Optional[int] = None
    level: Optional[ComplexityLevel] = None
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    reasons: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_total_and_level(cls, data: Any) -> Any:
        """Compute total and level when they are not supplied."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("total") is None:
            data["total"] = sum(int(data.get(name) or 0) for name in DIMENSIONS)
        if data.get("level") is None:
            data["level"] = ComplexityLevel.from_score(int(data["total"]))
        return data

    def dimension_sum(self) -> int:
        """Sum of the six sub-scores."""
        return sum(getattr(self, name) for name in DIMENSIONS)

    def consistency(self) -> float:
        """Agreement between the stored total and the sub-score sum, in [0, 1]."""
        recomputed = self.dimension_sum()
        return 1 - min(1.0, abs(self.total - recomputed) / max(recomputed, 1))

    def diagnostic_confidence(self) -> float:
        """Mean of completeness (dimensions with a reason) and consistency."""
        completeness = sum(1 for name in DIMENSIONS if self.reasons.get(name)) / len(DIMENSIONS)
        return round((completeness + self.consistency()) / 2, 4)

    def recalculate(self) -> "ComplexityScore":
        """Return a copy with total, level and confidence recomputed from the sub-scores."""
        total = self.dimension_sum()
        fixed = self.model_copy(
            update={"total": total, "level": ComplexityLevel.from_score(total)}
        )
        return fixed.model_copy(update={"confidence": fixed.diagnostic_confidence()})

    def as_dict(self) -> Dict[str, int]:
        """Sub-scores keyed by dimension name."""
        return {name: getattr(self, name) for name in DIMENSIONS}
