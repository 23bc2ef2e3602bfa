"""
Endpoint analysis.

- Six-dimension complexity scoring
- Operation id derivation
"""

from .complexity_scorer import ComplexityScorer
from .operation_namer import OperationNamer, snake_case

__all__ = [
    'ComplexityScorer',
    'OperationNamer',
    'snake_case',
]
