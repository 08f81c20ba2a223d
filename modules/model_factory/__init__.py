"""
Model Factory Module
====================

Responsibility:
- Translates catalog parameter records into scikit-learn estimators.
- Performs data-dependent precomputation (Mahalanobis inverse covariance).
- Seeds stochastic estimators for reproducible comparison.
"""

from .model_factory import ModelFactory, DISTANCE_METRICS, KERNEL_NAMES, inverse_covariance

__all__ = ['ModelFactory', 'DISTANCE_METRICS', 'KERNEL_NAMES', 'inverse_covariance']
