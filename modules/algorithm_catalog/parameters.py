"""
Per-family hyperparameter records.

Field names follow the scikit-learn constructor arguments they feed, except
for the nearest-neighbour records (``k``/``distance``) and the kernel machines
(``kernel`` is a :class:`Kernel`), which are translated by the ModelFactory.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Distance(Enum):
    """Distance functions available to the nearest-neighbour families."""
    EUCLIDEAN = 1
    MANHATTAN = 2
    MINKOWSKI = 3
    MAHALANOBIS = 4
    HAMMING = 5

    def __str__(self) -> str:
        return self.name.capitalize()


class Kernel(Enum):
    """Kernels available to the support vector families."""
    LINEAR = 1
    POLYNOMIAL = 2
    RBF = 3
    SIGMOID = 4

    def __str__(self) -> str:
        return "RBF" if self is Kernel.RBF else self.name.capitalize()


Gamma = Union[str, float]


# --- Regression ---

@dataclass(frozen=True)
class LinearRegressionParameters:
    fit_intercept: bool = True
    positive: bool = False


@dataclass(frozen=True)
class RidgeRegressionParameters:
    alpha: float = 1.0
    fit_intercept: bool = True
    solver: str = "auto"


@dataclass(frozen=True)
class LassoParameters:
    alpha: float = 1.0
    fit_intercept: bool = True
    max_iter: int = 1000
    tol: float = 1e-4


@dataclass(frozen=True)
class ElasticNetParameters:
    alpha: float = 1.0
    l1_ratio: float = 0.5
    fit_intercept: bool = True
    max_iter: int = 1000
    tol: float = 1e-4


@dataclass(frozen=True)
class SVRParameters:
    kernel: Kernel = Kernel.LINEAR
    C: float = 1.0
    epsilon: float = 0.1
    tol: float = 1e-3
    degree: int = 3
    gamma: Gamma = "scale"
    coef0: float = 0.0


@dataclass(frozen=True)
class DecisionTreeRegressorParameters:
    criterion: str = "squared_error"
    max_depth: Optional[int] = None
    min_samples_leaf: int = 1
    min_samples_split: int = 2
    random_state: Optional[int] = None


@dataclass(frozen=True)
class RandomForestRegressorParameters:
    n_estimators: int = 100
    max_depth: Optional[int] = None
    min_samples_leaf: int = 1
    min_samples_split: int = 2
    max_features: Union[str, int, float, None] = 1.0
    random_state: Optional[int] = None


@dataclass(frozen=True)
class KNNRegressorParameters:
    k: int = 3
    weights: str = "uniform"
    algorithm: str = "auto"
    distance: Distance = Distance.EUCLIDEAN
    p: float = 2.0  # Minkowski order, ignored by other distances


# --- Classification ---

@dataclass(frozen=True)
class LogisticRegressionParameters:
    C: float = 1.0
    solver: str = "lbfgs"
    max_iter: int = 100
    tol: float = 1e-4
    random_state: Optional[int] = None


@dataclass(frozen=True)
class RandomForestClassifierParameters:
    n_estimators: int = 100
    criterion: str = "gini"
    max_depth: Optional[int] = None
    min_samples_leaf: int = 1
    min_samples_split: int = 2
    max_features: Union[str, int, float, None] = "sqrt"
    random_state: Optional[int] = None


@dataclass(frozen=True)
class KNNClassifierParameters:
    k: int = 3
    weights: str = "uniform"
    algorithm: str = "auto"
    distance: Distance = Distance.EUCLIDEAN
    p: float = 2.0


@dataclass(frozen=True)
class SVCParameters:
    kernel: Kernel = Kernel.LINEAR
    C: float = 1.0
    tol: float = 1e-3
    max_iter: int = -1
    degree: int = 3
    gamma: Gamma = "scale"
    coef0: float = 0.0
    random_state: Optional[int] = None


@dataclass(frozen=True)
class DecisionTreeClassifierParameters:
    criterion: str = "gini"
    max_depth: Optional[int] = None
    min_samples_leaf: int = 1
    min_samples_split: int = 2
    random_state: Optional[int] = None


@dataclass(frozen=True)
class GaussianNBParameters:
    priors: Optional[Tuple[float, ...]] = None
    var_smoothing: float = 1e-9


@dataclass(frozen=True)
class CategoricalNBParameters:
    alpha: float = 1.0
    min_categories: Optional[int] = None
