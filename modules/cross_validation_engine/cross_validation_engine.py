import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, VariantIdentifier
from modules.base.base_engine import BaseEngine
from modules.config_manager import Settings
from modules.data_manager import Dataset
from modules.evaluation_engine import Metric
from modules.model_factory import ModelFactory
from modules.split_engine import SplitEngine
from modules.split_engine.split_engine import Fold
from utils.exceptions import EvaluationCancelled, VariantEvaluationFailed


@dataclass(frozen=True)
class CrossValidationResult:
    """Per-fold train/test scores of one variant, in fold order."""
    train_scores: Tuple[float, ...]
    test_scores: Tuple[float, ...]

    @property
    def folds(self) -> int:
        return len(self.test_scores)

    @property
    def mean_train_score(self) -> float:
        return float(np.mean(self.train_scores))

    @property
    def mean_test_score(self) -> float:
        return float(np.mean(self.test_scores))

    @property
    def train_score_variance(self) -> float:
        return float(np.var(self.train_scores))

    @property
    def test_score_variance(self) -> float:
        return float(np.var(self.test_scores))

    @property
    def train_score_std(self) -> float:
        return float(np.std(self.train_scores))

    @property
    def test_score_std(self) -> float:
        return float(np.std(self.test_scores))


class CrossValidationEngine(BaseEngine):
    """
    Scores one variant under K-fold cross-validation.

    Folds are independent and may run on worker threads; results are always
    re-assembled in fold order. Any failure inside a fold is reported as
    VariantEvaluationFailed so the caller can drop the variant and carry on.
    """

    def __init__(self, settings: Settings, logger: logging.Logger,
                 cancel_event: Optional[threading.Event] = None):
        super().__init__(settings, logger)
        self.cancel_event = cancel_event
        self.split_engine = SplitEngine(settings, logger)

    def _get_engine_directory_name(self) -> Optional[str]:
        return None

    def execute(self, dataset: Dataset, algorithm: Algorithm, params, metric: Metric,
                folds: Optional[List[Fold]] = None) -> Tuple[CrossValidationResult, float]:
        """
        Cross-validate `algorithm` configured with `params`.

        Args:
            dataset: Shared read-only dataset.
            algorithm: Catalog family to evaluate.
            params: The family's parameter record.
            metric: Scoring metric for both train and test folds.
            folds: Pre-built folds; built from the settings when omitted.

        Returns:
            (CrossValidationResult, wall-clock duration in seconds)

        Raises:
            VariantEvaluationFailed: When any fold fails to fit, predict or score.
        """
        variant = AlgorithmCatalog.identify(algorithm, params)
        if folds is None:
            folds = self.split_engine.execute(dataset.n_samples)

        self.logger.info(f"Evaluating {variant} over {len(folds)} folds...")
        start_time = time.perf_counter()

        try:
            fold_scores = Parallel(n_jobs=self.settings.n_jobs, backend="threading")(
                delayed(self._run_single_fold)(variant, params, dataset, train_idx, test_idx, metric)
                for train_idx, test_idx in folds
            )
        except VariantEvaluationFailed:
            raise
        except Exception as e:
            raise VariantEvaluationFailed(variant, e) from e

        duration = time.perf_counter() - start_time
        result = CrossValidationResult(
            train_scores=tuple(s[0] for s in fold_scores),
            test_scores=tuple(s[1] for s in fold_scores),
        )
        self.logger.info(
            f"{variant} finished in {duration:.2f}s "
            f"(train {metric}: {result.mean_train_score:.4f}, test {metric}: {result.mean_test_score:.4f})"
        )
        return result, duration

    def _run_single_fold(self, variant: VariantIdentifier, params, dataset: Dataset,
                         train_idx: np.ndarray, test_idx: np.ndarray,
                         metric: Metric) -> Tuple[float, float]:
        """Fit on the training indices and score both sides of the fold."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise EvaluationCancelled(variant)

        x_train, y_train = dataset.x[train_idx], dataset.y[train_idx]
        x_test, y_test = dataset.x[test_idx], dataset.y[test_idx]

        model = ModelFactory.fit(variant.algorithm, params, x_train, y_train, seed=self.settings.seed)

        train_score = metric.score(y_train, model.predict(x_train))
        test_score = metric.score(y_test, model.predict(x_test))

        if not (np.isfinite(train_score) and np.isfinite(test_score)):
            raise ValueError(f"non-finite {metric} score (train={train_score}, test={test_score})")
        return train_score, test_score
