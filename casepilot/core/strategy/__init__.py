"""Strategy recommendation and scenario expansion."""

from .cache import RecommendationCache
from .recommender import StrategyRecommender
from .scenario_expander import ScenarioExpander

__all__ = [
    'RecommendationCache',
    'StrategyRecommender',
    'ScenarioExpander',
]
