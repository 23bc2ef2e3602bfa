"""Strategy recommendation data model."""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from casepilot.models.complexity import ComplexityScore
from casepilot.models.taxonomy import StrategyType


class StrategyRecommendation(BaseModel):
    """Primary and complementary strategies chosen for an endpoint."""

    model_config = ConfigDict(frozen=True)

    primary_strategy: Optional[StrategyType] = None
    complementary_strategies: List[StrategyType] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    estimated_effort: timedelta = Field(default_factory=timedelta)
    estimated_test_cases: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    execution_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    reasoning: str = ""
    is_fallback: bool = False
    complexity: Optional[ComplexityScore] = None

    @field_validator("complementary_strategies")
    @classmethod
    def dedupe_complementary(cls, v: List[StrategyType]) -> List[StrategyType]:
        """Collapse duplicates while keeping first-seen order."""
        return list(dict.fromkeys(v))

    @property
    def all_strategies(self) -> List[StrategyType]:
        """Primary strategy followed by the complementary ones."""
        strategies = [self.primary_strategy] if self.primary_strategy else []
        strategies.extend(
            s for s in self.complementary_strategies if s != self.primary_strategy
        )
        return strategies
