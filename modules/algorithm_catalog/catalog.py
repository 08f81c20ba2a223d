"""
The closed catalog of model families.

Declaration order matters: it is the tie-break order of the comparison
ledger. Family codes are persisted inside final-model tags and must never be
reused or renumbered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type, Union

from sklearn.ensemble import RandomForestClassifier, RandomForestRegressor
from sklearn.linear_model import (
    ElasticNet,
    Lasso,
    LinearRegression,
    LogisticRegression,
    Ridge,
)
from sklearn.naive_bayes import CategoricalNB, GaussianNB
from sklearn.neighbors import KNeighborsClassifier, KNeighborsRegressor
from sklearn.svm import SVC, SVR
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from modules.algorithm_catalog import parameters as p
from modules.algorithm_catalog.parameters import Distance, Kernel


class TaskKind(Enum):
    REGRESSION = "regression"
    CLASSIFICATION = "classification"

    def __str__(self) -> str:
        return self.value.capitalize()


class Algorithm(Enum):
    LOGISTIC_REGRESSION = "LogisticRegression"
    RANDOM_FOREST_CLASSIFIER = "RandomForestClassifier"
    KNN_CLASSIFIER = "KNNClassifier"
    DECISION_TREE_CLASSIFIER = "DecisionTreeClassifier"
    GAUSSIAN_NAIVE_BAYES = "GaussianNaiveBayes"
    CATEGORICAL_NAIVE_BAYES = "CategoricalNaiveBayes"
    SVC = "SVC"
    LINEAR_REGRESSION = "LinearRegression"
    SVR = "SVR"
    LASSO = "Lasso"
    RIDGE = "Ridge"
    ELASTIC_NET = "ElasticNet"
    DECISION_TREE_REGRESSOR = "DecisionTreeRegressor"
    RANDOM_FOREST_REGRESSOR = "RandomForestRegressor"
    KNN_REGRESSOR = "KNNRegressor"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        """Look up an algorithm by its display name or enum member name."""
        for algorithm in cls:
            if name in (algorithm.value, algorithm.name):
                return algorithm
        raise ValueError(f"Unknown algorithm: {name}. Available: {[a.value for a in cls]}")


SubKind = Union[Distance, Kernel, None]


@dataclass(frozen=True)
class VariantIdentifier:
    """An algorithm family plus the structural sub-kind (distance or kernel)."""
    algorithm: Algorithm
    sub_kind: SubKind = None

    def __str__(self) -> str:
        if self.sub_kind is None:
            return str(self.algorithm)
        return f"{self.algorithm}({self.sub_kind})"

    @property
    def tag(self) -> Tuple[int, int]:
        """(family code, sub-kind code) as stored in a final-model blob."""
        sub_code = 0 if self.sub_kind is None else self.sub_kind.value
        return AlgorithmCatalog.entry(self.algorithm).family_code, sub_code


@dataclass(frozen=True)
class CatalogEntry:
    algorithm: Algorithm
    family_code: int
    task_kind: TaskKind
    params_type: type
    estimator_class: type
    sub_kind_type: Optional[Type[Enum]] = None
    requires_binary: bool = False


_ENTRIES: Tuple[CatalogEntry, ...] = (
    CatalogEntry(Algorithm.LOGISTIC_REGRESSION, 1, TaskKind.CLASSIFICATION,
                 p.LogisticRegressionParameters, LogisticRegression),
    CatalogEntry(Algorithm.RANDOM_FOREST_CLASSIFIER, 2, TaskKind.CLASSIFICATION,
                 p.RandomForestClassifierParameters, RandomForestClassifier),
    CatalogEntry(Algorithm.KNN_CLASSIFIER, 3, TaskKind.CLASSIFICATION,
                 p.KNNClassifierParameters, KNeighborsClassifier, sub_kind_type=Distance),
    CatalogEntry(Algorithm.DECISION_TREE_CLASSIFIER, 4, TaskKind.CLASSIFICATION,
                 p.DecisionTreeClassifierParameters, DecisionTreeClassifier),
    CatalogEntry(Algorithm.GAUSSIAN_NAIVE_BAYES, 5, TaskKind.CLASSIFICATION,
                 p.GaussianNBParameters, GaussianNB),
    CatalogEntry(Algorithm.CATEGORICAL_NAIVE_BAYES, 6, TaskKind.CLASSIFICATION,
                 p.CategoricalNBParameters, CategoricalNB),
    CatalogEntry(Algorithm.SVC, 7, TaskKind.CLASSIFICATION,
                 p.SVCParameters, SVC, sub_kind_type=Kernel, requires_binary=True),
    CatalogEntry(Algorithm.LINEAR_REGRESSION, 8, TaskKind.REGRESSION,
                 p.LinearRegressionParameters, LinearRegression),
    CatalogEntry(Algorithm.SVR, 9, TaskKind.REGRESSION,
                 p.SVRParameters, SVR, sub_kind_type=Kernel),
    CatalogEntry(Algorithm.LASSO, 10, TaskKind.REGRESSION,
                 p.LassoParameters, Lasso),
    CatalogEntry(Algorithm.RIDGE, 11, TaskKind.REGRESSION,
                 p.RidgeRegressionParameters, Ridge),
    CatalogEntry(Algorithm.ELASTIC_NET, 12, TaskKind.REGRESSION,
                 p.ElasticNetParameters, ElasticNet),
    CatalogEntry(Algorithm.DECISION_TREE_REGRESSOR, 13, TaskKind.REGRESSION,
                 p.DecisionTreeRegressorParameters, DecisionTreeRegressor),
    CatalogEntry(Algorithm.RANDOM_FOREST_REGRESSOR, 14, TaskKind.REGRESSION,
                 p.RandomForestRegressorParameters, RandomForestRegressor),
    CatalogEntry(Algorithm.KNN_REGRESSOR, 15, TaskKind.REGRESSION,
                 p.KNNRegressorParameters, KNeighborsRegressor, sub_kind_type=Distance),
)


class AlgorithmCatalog:
    """
    Registry of every supported model family.

    Each entry declares task compatibility, structural constraints, the
    parameter record type and the scikit-learn estimator that implements it.
    """

    VERSION = 1

    ENTRIES: Tuple[CatalogEntry, ...] = _ENTRIES
    _BY_ALGORITHM: Dict[Algorithm, CatalogEntry] = {e.algorithm: e for e in _ENTRIES}
    _BY_CODE: Dict[int, CatalogEntry] = {e.family_code: e for e in _ENTRIES}
    _BY_PARAMS: Dict[type, CatalogEntry] = {e.params_type: e for e in _ENTRIES}
    _ORDER: Dict[Algorithm, int] = {e.algorithm: i for i, e in enumerate(_ENTRIES)}

    @classmethod
    def entry(cls, algorithm: Algorithm) -> CatalogEntry:
        return cls._BY_ALGORITHM[algorithm]

    @classmethod
    def entry_for_code(cls, family_code: int) -> Optional[CatalogEntry]:
        return cls._BY_CODE.get(family_code)

    @classmethod
    def entry_for_params(cls, params) -> CatalogEntry:
        try:
            return cls._BY_PARAMS[type(params)]
        except KeyError:
            raise TypeError(f"{type(params).__name__} is not a known parameter record.") from None

    @classmethod
    def declaration_index(cls, algorithm: Algorithm) -> int:
        return cls._ORDER[algorithm]

    @classmethod
    def algorithms(cls, task_kind: Optional[TaskKind] = None) -> Tuple[Algorithm, ...]:
        """All families, optionally restricted to one task kind, in declaration order."""
        return tuple(
            e.algorithm for e in cls.ENTRIES
            if task_kind is None or e.task_kind == task_kind
        )

    @classmethod
    def is_structurally_eligible(cls, algorithm: Algorithm, number_of_classes: int) -> bool:
        entry = cls.entry(algorithm)
        if entry.requires_binary and number_of_classes != 2:
            return False
        return True

    @classmethod
    def eligible(cls, task_kind: TaskKind, number_of_classes: int) -> Tuple[Algorithm, ...]:
        """
        Families that may run on a target of the given kind and class count.

        Structural ineligibility (e.g. a binary-only classifier on a 3-class
        target) removes a family here, independently of any skip list.
        """
        return tuple(
            a for a in cls.algorithms(task_kind)
            if cls.is_structurally_eligible(a, number_of_classes)
        )

    @classmethod
    def excluded(cls, task_kind: TaskKind, number_of_classes: int) -> Tuple[Algorithm, ...]:
        """Families of the task kind removed by a structural constraint."""
        return tuple(
            a for a in cls.algorithms(task_kind)
            if not cls.is_structurally_eligible(a, number_of_classes)
        )

    @classmethod
    def identify(cls, algorithm: Algorithm, params) -> VariantIdentifier:
        """Build the variant identifier for a family configured with `params`."""
        entry = cls.entry(algorithm)
        if not isinstance(params, entry.params_type):
            raise TypeError(
                f"{algorithm} expects {entry.params_type.__name__}, got {type(params).__name__}"
            )
        if entry.sub_kind_type is Distance:
            return VariantIdentifier(algorithm, params.distance)
        if entry.sub_kind_type is Kernel:
            return VariantIdentifier(algorithm, params.kernel)
        return VariantIdentifier(algorithm)

    @classmethod
    def variant_from_tag(cls, family_code: int, sub_code: int) -> Optional[VariantIdentifier]:
        """Decode a persisted tag. Returns None when the tag names no variant."""
        entry = cls.entry_for_code(family_code)
        if entry is None:
            return None
        if entry.sub_kind_type is None:
            return VariantIdentifier(entry.algorithm) if sub_code == 0 else None
        try:
            return VariantIdentifier(entry.algorithm, entry.sub_kind_type(sub_code))
        except ValueError:
            return None

    @classmethod
    def all_variants(cls) -> Tuple[VariantIdentifier, ...]:
        """Every (family, sub-kind) combination the catalog can produce."""
        variants = []
        for e in cls.ENTRIES:
            if e.sub_kind_type is None:
                variants.append(VariantIdentifier(e.algorithm))
            else:
                variants.extend(VariantIdentifier(e.algorithm, s) for s in e.sub_kind_type)
        return tuple(variants)
