import logging
from typing import Any, Callable, Dict, Optional

import numpy as np

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, VariantIdentifier
from modules.base.base_engine import BaseEngine
from modules.config_manager import Settings
from modules.model_factory import DISTANCE_METRICS, KERNEL_NAMES
from modules.training_engine import FinalModel
from utils.exceptions import DataValidationError, ShapeMismatch, TagMismatch, UnknownVariantTag
from utils.model_loader import safe_load_model


def _check_estimator_class(variant: VariantIdentifier, estimator: Any) -> None:
    expected = AlgorithmCatalog.entry(variant.algorithm).estimator_class
    if type(estimator) is not expected:
        raise TagMismatch(
            f"Tag {variant} expects a {expected.__name__}, "
            f"but the payload holds a {type(estimator).__name__}."
        )


def _plain_arm(variant: VariantIdentifier, estimator: Any) -> None:
    _check_estimator_class(variant, estimator)


def _neighbors_arm(variant: VariantIdentifier, estimator: Any) -> None:
    _check_estimator_class(variant, estimator)
    expected = DISTANCE_METRICS[variant.sub_kind]
    if estimator.metric != expected:
        raise TagMismatch(f"Tag {variant} expects metric '{expected}', payload uses '{estimator.metric}'.")


def _kernel_arm(variant: VariantIdentifier, estimator: Any) -> None:
    _check_estimator_class(variant, estimator)
    expected = KERNEL_NAMES[variant.sub_kind]
    if estimator.kernel != expected:
        raise TagMismatch(f"Tag {variant} expects kernel '{expected}', payload uses '{estimator.kernel}'.")


class PredictionEngine(BaseEngine):
    """
    The Prediction Dispatcher.

    Selects the arm for the model's tag, deserializes and validates the
    estimator against it, then predicts. Has no side effects.
    """

    ARMS: Dict[Algorithm, Callable[[VariantIdentifier, Any], None]] = {
        Algorithm.LOGISTIC_REGRESSION: _plain_arm,
        Algorithm.RANDOM_FOREST_CLASSIFIER: _plain_arm,
        Algorithm.KNN_CLASSIFIER: _neighbors_arm,
        Algorithm.DECISION_TREE_CLASSIFIER: _plain_arm,
        Algorithm.GAUSSIAN_NAIVE_BAYES: _plain_arm,
        Algorithm.CATEGORICAL_NAIVE_BAYES: _plain_arm,
        Algorithm.SVC: _kernel_arm,
        Algorithm.LINEAR_REGRESSION: _plain_arm,
        Algorithm.SVR: _kernel_arm,
        Algorithm.LASSO: _plain_arm,
        Algorithm.RIDGE: _plain_arm,
        Algorithm.ELASTIC_NET: _plain_arm,
        Algorithm.DECISION_TREE_REGRESSOR: _plain_arm,
        Algorithm.RANDOM_FOREST_REGRESSOR: _plain_arm,
        Algorithm.KNN_REGRESSOR: _neighbors_arm,
    }

    def __init__(self, settings: Settings, logger: logging.Logger):
        super().__init__(settings, logger)

    def _get_engine_directory_name(self) -> Optional[str]:
        return None

    def load(self, final_model: FinalModel) -> Any:
        """Deserialize the payload through the arm selected by the tag."""
        variant = final_model.variant
        arm = self.ARMS.get(variant.algorithm)
        if arm is None:
            raise UnknownVariantTag(f"No prediction arm registered for {variant}.")

        estimator = safe_load_model(final_model.payload)
        arm(variant, estimator)
        return estimator

    def execute(self, final_model: FinalModel, x) -> np.ndarray:
        """
        Predict targets for `x` with the committed final model.

        Parameters:
            final_model: Tagged model produced by the TrainingEngine.
            x: Feature matrix (rows = samples); a 1-D input is one sample.

        Returns:
            Predicted target vector.
        """
        try:
            x_arr = np.asarray(x, dtype=float)
        except (TypeError, ValueError) as e:
            raise DataValidationError(f"Prediction input must be numeric and rectangular: {e}")

        if x_arr.ndim == 1:
            x_arr = x_arr.reshape(1, -1)
        if x_arr.ndim != 2:
            raise DataValidationError(f"Prediction input must be 2-dimensional, got {x_arr.ndim} dimension(s).")
        if x_arr.shape[1] != final_model.n_features:
            raise ShapeMismatch(final_model.n_features, x_arr.shape[1])

        estimator = self.load(final_model)
        self.logger.debug(f"Predicting {x_arr.shape[0]} samples with {final_model.variant}")
        return np.asarray(estimator.predict(x_arr), dtype=float)
