"""
Cross-Validation Engine
=======================

Responsibility:
- K-fold evaluation of a single catalog variant.
- Fold-level parallelism with order-preserving aggregation.
- Per-variant failure isolation and cooperative cancellation between folds.
"""

from .cross_validation_engine import CrossValidationEngine, CrossValidationResult

__all__ = ['CrossValidationEngine', 'CrossValidationResult']
