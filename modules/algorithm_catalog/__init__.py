"""
Algorithm Catalog Module
========================

Responsibility:
- Closed enumeration of supported model families and their sub-kinds.
- Task compatibility and structural constraints (binary-only classifiers).
- Stable family codes used to tag persisted final models.
- Per-family hyperparameter record types.
"""

from .parameters import (
    Distance,
    Kernel,
    LinearRegressionParameters,
    RidgeRegressionParameters,
    LassoParameters,
    ElasticNetParameters,
    SVRParameters,
    DecisionTreeRegressorParameters,
    RandomForestRegressorParameters,
    KNNRegressorParameters,
    LogisticRegressionParameters,
    RandomForestClassifierParameters,
    KNNClassifierParameters,
    SVCParameters,
    DecisionTreeClassifierParameters,
    GaussianNBParameters,
    CategoricalNBParameters,
)
from .catalog import Algorithm, AlgorithmCatalog, CatalogEntry, TaskKind, VariantIdentifier

__all__ = [
    'Algorithm',
    'AlgorithmCatalog',
    'CatalogEntry',
    'TaskKind',
    'VariantIdentifier',
    'Distance',
    'Kernel',
    'LinearRegressionParameters',
    'RidgeRegressionParameters',
    'LassoParameters',
    'ElasticNetParameters',
    'SVRParameters',
    'DecisionTreeRegressorParameters',
    'RandomForestRegressorParameters',
    'KNNRegressorParameters',
    'LogisticRegressionParameters',
    'RandomForestClassifierParameters',
    'KNNClassifierParameters',
    'SVCParameters',
    'DecisionTreeClassifierParameters',
    'GaussianNBParameters',
    'CategoricalNBParameters',
]
