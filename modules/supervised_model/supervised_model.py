import logging
import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, TaskKind, VariantIdentifier
from modules.comparison_engine import ComparisonEntry, ComparisonLedger, RunSummary
from modules.config_manager import Settings
from modules.cross_validation_engine import CrossValidationEngine
from modules.data_manager import DataManager, Dataset
from modules.evaluation_engine import Metric, check_metric_task
from modules.prediction_engine import PredictionEngine
from modules.reporting_engine import ReportingEngine
from modules.split_engine import SplitEngine
from modules.split_engine.split_engine import Fold
from modules.training_engine import FinalModel, TrainingEngine
from utils.error_handling import handle_engine_errors
from utils.exceptions import ConfigurationError, EmptyLedger, NoFinalModel, VariantEvaluationFailed


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    COMPARED = "compared"
    FINALIZED = "finalized"


class SupervisedModel:
    """
    Orchestrates model selection for one dataset.

    compare_models -> train_final_model -> predict. Running compare_models
    again discards the committed final model and starts over from the
    current settings.
    """

    def __init__(self, x, y, settings: Optional[Settings] = None,
                 logger: Optional[logging.Logger] = None,
                 cancel_event: Optional[threading.Event] = None):
        dataset = x if isinstance(x, Dataset) else Dataset.from_arrays(x, y)
        self._init(dataset, settings, logger, cancel_event)

    def _init(self, dataset: Dataset, settings: Optional[Settings],
              logger: Optional[logging.Logger], cancel_event: Optional[threading.Event]) -> None:
        self.dataset = dataset
        self.logger = logger or logging.getLogger("supervised_model")
        self.cancel_event = cancel_event

        if settings is None:
            settings = (Settings.default_classification()
                        if dataset.infer_task_kind() == TaskKind.CLASSIFICATION
                        else Settings.default_regression())
        self.settings = settings
        if settings.verbose:
            # Raise the level on a child so an injected logger is left untouched.
            self.logger = self.logger.getChild("supervised_model")
            self.logger.setLevel(logging.DEBUG)

        self._ledger = ComparisonLedger(settings.sort_by)
        self._summary = RunSummary()
        self._final_model: Optional[FinalModel] = None
        self._compared_settings: Optional[Settings] = None
        self._task_kind: Optional[TaskKind] = None
        self._state = EngineState.UNINITIALIZED

        self.prediction_engine = PredictionEngine(settings, self.logger)

    # --- Alternate constructors ---

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, target: Union[str, int],
                       settings: Optional[Settings] = None,
                       logger: Optional[logging.Logger] = None) -> "SupervisedModel":
        dataset = DataManager(logger).from_dataframe(df, target)
        return cls(dataset, None, settings=settings, logger=logger)

    @classmethod
    def from_csv(cls, file_path: Union[str, Path], target: Union[str, int], header: bool = True,
                 settings: Optional[Settings] = None,
                 logger: Optional[logging.Logger] = None) -> "SupervisedModel":
        dataset = DataManager(logger).from_csv(file_path, target, header=header)
        return cls(dataset, None, settings=settings, logger=logger)

    # --- Read-only views ---

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def task_kind(self) -> Optional[TaskKind]:
        """Task kind of the last comparison run."""
        return self._task_kind

    @property
    def comparison(self) -> Tuple[ComparisonEntry, ...]:
        return self._ledger.entries()

    @property
    def run_summary(self) -> RunSummary:
        return self._summary

    @property
    def final_model(self) -> Optional[FinalModel]:
        return self._final_model

    # --- Pipeline ---

    def _preflight(self) -> Tuple[TaskKind, List[Tuple[Algorithm, object]], List[Fold],
                                  Tuple[Algorithm, ...], Tuple[Algorithm, ...]]:
        """
        Resolve everything a run needs before any model is trained, so
        configuration errors surface immediately and by name.
        """
        task_kind = self.settings.task_kind or self.dataset.infer_task_kind()
        check_metric_task(self.settings.sort_by, task_kind)

        n_samples = self.dataset.n_samples
        folds_count = self.settings.number_of_folds
        if (self.settings.sort_by is Metric.R_SQUARED and 2 <= folds_count <= n_samples
                and n_samples // folds_count < 2):
            raise ConfigurationError(
                f"R^2 needs at least 2 rows per test fold; {n_samples} samples over "
                f"{folds_count} folds leaves fewer."
            )

        n_classes = self.dataset.number_of_classes
        eligible = AlgorithmCatalog.eligible(task_kind, n_classes)
        excluded = AlgorithmCatalog.excluded(task_kind, n_classes)
        skipped = tuple(a for a in eligible if self.settings.is_skipped(a))

        plan = [
            (algorithm, self.settings.resolve(algorithm))
            for algorithm in eligible
            if algorithm not in skipped
        ]
        for algorithm, params in plan:
            AlgorithmCatalog.identify(algorithm, params)

        folds = SplitEngine(self.settings, self.logger).execute(self.dataset.n_samples)
        return task_kind, plan, folds, skipped, excluded

    @handle_engine_errors("Model comparison")
    def compare_models(self) -> Tuple[ComparisonEntry, ...]:
        """
        Cross-validate every eligible, non-skipped variant and rank them.

        Returns:
            Ledger snapshot in rank order.

        Raises:
            MissingConfiguration / MetricTaskMismatch / ConfigurationError:
                Before any training starts.
        """
        task_kind, plan, folds, skipped, excluded = self._preflight()

        self._final_model = None
        self._ledger = ComparisonLedger(self.settings.sort_by)
        self._compared_settings = self.settings
        self._task_kind = task_kind

        self.logger.info(
            f"Comparing {len(plan)} {task_kind} variant(s) over {len(folds)} folds "
            f"(ranking by {self.settings.sort_by})"
        )
        for algorithm in skipped:
            self.logger.info(f"{algorithm} skipped by configuration.")
        for algorithm in excluded:
            self.logger.info(f"{algorithm} excluded: not applicable to "
                             f"{self.dataset.number_of_classes} target classes.")

        cv_engine = CrossValidationEngine(self.settings, self.logger, self.cancel_event)
        outcomes = Parallel(n_jobs=self.settings.variant_n_jobs, backend="threading")(
            delayed(self._evaluate_variant)(cv_engine, algorithm, params, folds)
            for algorithm, params in plan
        )

        succeeded = tuple(variant for variant, cause in outcomes if cause is None)
        failed = {variant: cause for variant, cause in outcomes if cause is not None}
        self._summary = RunSummary(
            succeeded=succeeded, skipped=skipped, excluded=excluded, failed=failed,
        )
        self._state = EngineState.COMPARED

        self.logger.info(
            f"Comparison finished: {len(succeeded)} succeeded, {len(failed)} failed, "
            f"{len(skipped)} skipped, {len(excluded)} excluded."
        )
        if self.settings.results_dir:
            ReportingEngine(self.settings, self.logger).execute(
                self._ledger.entries(), self.settings, self._summary
            )
        return self._ledger.entries()

    def _evaluate_variant(self, cv_engine: CrossValidationEngine, algorithm: Algorithm,
                          params, folds: List[Fold]) -> Tuple[VariantIdentifier, Optional[str]]:
        """Evaluate one variant; a failure drops only this variant."""
        variant = AlgorithmCatalog.identify(algorithm, params)
        try:
            result, duration = cv_engine.execute(
                self.dataset, algorithm, params, self.settings.sort_by, folds=folds
            )
        except VariantEvaluationFailed as e:
            self.logger.warning(f"{variant} dropped from comparison: {e.cause}")
            return variant, str(e.cause)
        self._ledger.record(variant, result, duration)
        return variant, None

    @handle_engine_errors("Final model training")
    def train_final_model(self) -> FinalModel:
        """
        Retrain the top-ranked variant on the full dataset and commit it.

        Raises:
            EmptyLedger: No comparison has run, or no variant survived it.
            FinalTrainingFailed: The winner could not be retrained.
        """
        if self._state == EngineState.UNINITIALIZED:
            raise EmptyLedger("No comparison has been run; call compare_models() first.")

        # Retrain with the settings the ledger was ranked under, not the current ones.
        settings = self._compared_settings
        best = self._ledger.best()
        params = settings.resolve(best.variant.algorithm)
        self.logger.info(
            f"Best variant: {best.variant} (test {settings.sort_by}: {best.mean_test_score:.4f})"
        )

        self._final_model = TrainingEngine(settings, self.logger).execute(
            self.dataset, best.variant, params
        )
        self._state = EngineState.FINALIZED
        return self._final_model

    def auto(self) -> FinalModel:
        """Compare all models, then train the winner."""
        self.compare_models()
        return self.train_final_model()

    def predict(self, x) -> np.ndarray:
        if self._final_model is None:
            raise NoFinalModel("No final model committed; call train_final_model() or auto() first.")
        return self.prediction_engine.execute(self._final_model, x)

    def save_final_model(self, path: Union[str, Path]) -> Path:
        if self._final_model is None:
            raise NoFinalModel("No final model committed; nothing to save.")
        saved = self._final_model.save(path)
        self.logger.info(f"Final model ({self._final_model.variant}) saved to {saved}")
        return saved

    def __str__(self) -> str:
        frame = ReportingEngine.comparison_frame(self._ledger.entries(), self.settings.sort_by)
        return ReportingEngine.render(frame)
