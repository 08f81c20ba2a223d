import dataclasses
import inspect
from typing import Any, Callable, Dict, Optional

import numpy as np

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, Distance, Kernel


# scikit-learn metric names per distance kind
DISTANCE_METRICS = {
    Distance.EUCLIDEAN: 'euclidean',
    Distance.MANHATTAN: 'manhattan',
    Distance.MINKOWSKI: 'minkowski',
    Distance.MAHALANOBIS: 'mahalanobis',
    Distance.HAMMING: 'hamming',
}

# scikit-learn kernel names per kernel kind
KERNEL_NAMES = {
    Kernel.LINEAR: 'linear',
    Kernel.POLYNOMIAL: 'poly',
    Kernel.RBF: 'rbf',
    Kernel.SIGMOID: 'sigmoid',
}

# Distances the tree-based neighbour searches cannot serve
_BRUTE_ONLY = {Distance.MAHALANOBIS, Distance.HAMMING}


def inverse_covariance(X: np.ndarray) -> np.ndarray:
    """
    Pseudo-inverse of the feature covariance, used as the Mahalanobis `VI`.
    Computed from the training matrix only.
    """
    cov = np.atleast_2d(np.cov(np.asarray(X, dtype=float), rowvar=False))
    return np.linalg.pinv(cov)


def _record_kwargs(params, X: np.ndarray) -> Dict[str, Any]:
    return dataclasses.asdict(params)


def _neighbors_kwargs(params, X: np.ndarray) -> Dict[str, Any]:
    kwargs = {
        'n_neighbors': params.k,
        'weights': params.weights,
        'algorithm': 'brute' if params.distance in _BRUTE_ONLY else params.algorithm,
        'metric': DISTANCE_METRICS[params.distance],
    }
    if params.distance is Distance.MINKOWSKI:
        kwargs['p'] = params.p
    elif params.distance is Distance.MAHALANOBIS:
        kwargs['metric_params'] = {'VI': inverse_covariance(X)}
    return kwargs


def _kernel_kwargs(params, X: np.ndarray) -> Dict[str, Any]:
    kwargs = dataclasses.asdict(params)
    kwargs['kernel'] = KERNEL_NAMES[params.kernel]
    return kwargs


def _gaussian_nb_kwargs(params, X: np.ndarray) -> Dict[str, Any]:
    kwargs = dataclasses.asdict(params)
    if kwargs['priors'] is not None:
        kwargs['priors'] = np.asarray(kwargs['priors'], dtype=float)
    return kwargs


class ModelFactory:
    """
    Factory for creating Machine Learning models with a unified interface.

    Every catalog family has exactly one keyword builder. Builders receive the
    training matrix so data-dependent precomputation (the Mahalanobis inverse
    covariance) happens once per fit, never per sample.
    """

    KWARGS_BUILDERS: Dict[Algorithm, Callable[[Any, np.ndarray], Dict[str, Any]]] = {
        Algorithm.LOGISTIC_REGRESSION: _record_kwargs,
        Algorithm.RANDOM_FOREST_CLASSIFIER: _record_kwargs,
        Algorithm.KNN_CLASSIFIER: _neighbors_kwargs,
        Algorithm.DECISION_TREE_CLASSIFIER: _record_kwargs,
        Algorithm.GAUSSIAN_NAIVE_BAYES: _gaussian_nb_kwargs,
        Algorithm.CATEGORICAL_NAIVE_BAYES: _record_kwargs,
        Algorithm.SVC: _kernel_kwargs,
        Algorithm.LINEAR_REGRESSION: _record_kwargs,
        Algorithm.SVR: _kernel_kwargs,
        Algorithm.LASSO: _record_kwargs,
        Algorithm.RIDGE: _record_kwargs,
        Algorithm.ELASTIC_NET: _record_kwargs,
        Algorithm.DECISION_TREE_REGRESSOR: _record_kwargs,
        Algorithm.RANDOM_FOREST_REGRESSOR: _record_kwargs,
        Algorithm.KNN_REGRESSOR: _neighbors_kwargs,
    }

    @classmethod
    def create(cls, algorithm: Algorithm, params, X_train: np.ndarray,
               seed: Optional[int] = None) -> Any:
        """
        Create and return an unfitted estimator for `algorithm`.

        Args:
            algorithm: Catalog family.
            params: The family's parameter record.
            X_train: Training matrix the estimator will be fitted on.
            seed: Fallback `random_state` for records that leave it unset.
        """
        entry = AlgorithmCatalog.entry(algorithm)
        if not isinstance(params, entry.params_type):
            raise TypeError(
                f"{algorithm} expects {entry.params_type.__name__}, got {type(params).__name__}"
            )

        kwargs = cls.KWARGS_BUILDERS[algorithm](params, X_train)
        valid_params = cls._filter_params(entry.estimator_class, kwargs)

        if seed is not None and valid_params.get('random_state', None) is None:
            if 'random_state' in cls._accepted_params(entry.estimator_class):
                valid_params['random_state'] = seed

        return entry.estimator_class(**valid_params)

    @classmethod
    def fit(cls, algorithm: Algorithm, params, X_train: np.ndarray, y_train: np.ndarray,
            seed: Optional[int] = None) -> Any:
        """Create an estimator and fit it on the given training data."""
        model = cls.create(algorithm, params, X_train, seed)
        model.fit(X_train, y_train)
        return model

    @staticmethod
    def _accepted_params(model_class) -> set:
        sig = inspect.signature(model_class.__init__)
        return {
            p.name for p in sig.parameters.values()
            if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        }

    @classmethod
    def _filter_params(cls, model_class, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Remove parameters from `params` that are not accepted by `model_class` constructor.
        """
        sig = inspect.signature(model_class.__init__)

        # Always allow **kwargs if the model supports it
        has_kwargs = any(p.kind == p.VAR_KEYWORD for p in sig.parameters.values())

        if has_kwargs:
            return dict(params)

        valid_keys = cls._accepted_params(model_class)
        return {k: v for k, v in params.items() if k in valid_keys}
