import dataclasses
import json
import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np
import sklearn

from modules.algorithm_catalog import AlgorithmCatalog, VariantIdentifier
from modules.base.base_engine import BaseEngine
from modules.config_manager import Settings
from modules.data_manager import Dataset
from modules.model_factory import ModelFactory
from modules.training_engine.final_model import FinalModel
from utils import constants
from utils.exceptions import FinalTrainingFailed


class NumpyEncoder(json.JSONEncoder):
    """
    Helper to serialize NumPy types and enums in metadata JSONs.
    """
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, Enum):
            return str(obj)
        return json.JSONEncoder.default(self, obj)


class TrainingEngine(BaseEngine):
    """
    The Final Model Store.

    Retrains the winning variant on the entire dataset with the parameters it
    was compared with, and tags the serialized estimator with its variant.
    """

    def __init__(self, settings: Settings, logger: logging.Logger):
        super().__init__(settings, logger)

    def _get_engine_directory_name(self) -> str:
        return constants.FINAL_MODEL_DIR

    def execute(self, dataset: Dataset, winner: VariantIdentifier, params) -> FinalModel:
        """
        Train the winner on the full dataset and commit it.

        Args:
            dataset: The full dataset (not fold-restricted).
            winner: Variant at the top of the comparison ledger.
            params: The parameter record used during comparison.

        Returns:
            The committed FinalModel.

        Raises:
            FinalTrainingFailed: If fitting or serialization fails.
        """
        self.logger.info(f"Starting Final Model Training for {winner}...")

        try:
            variant = AlgorithmCatalog.identify(winner.algorithm, params)
        except TypeError as e:
            raise FinalTrainingFailed(winner, e) from e
        if variant != winner:
            raise FinalTrainingFailed(winner, f"parameters describe {variant}, not the compared variant")

        start_time = time.perf_counter()
        try:
            model = ModelFactory.fit(winner.algorithm, params, dataset.x, dataset.y, seed=self.settings.seed)
            final_model = FinalModel.from_estimator(winner, model, dataset.n_features)
        except Exception as e:
            self.logger.error(f"Final training of {winner} failed: {e}")
            raise FinalTrainingFailed(winner, e) from e
        duration = time.perf_counter() - start_time

        self.logger.info(
            f"Trained {winner} on {dataset.n_samples} samples with {dataset.n_features} features "
            f"in {duration:.2f} seconds."
        )

        if self.output_dir is not None:
            self._save_artifacts(final_model, params, dataset, duration)

        return final_model

    def _save_artifacts(self, final_model: FinalModel, params, dataset: Dataset, duration: float) -> None:
        model_path = final_model.save(self.output_dir / constants.FINAL_MODEL_FILE)
        self.logger.info(f"Model saved to {model_path}")

        metadata = self.build_metadata(final_model, params, dataset, duration)
        with open(self.output_dir / constants.TRAINING_METADATA_FILE, 'w') as f:
            json.dump(metadata, f, indent=2, cls=NumpyEncoder)

    @staticmethod
    def build_metadata(final_model: FinalModel, params, dataset: Dataset,
                       duration: Optional[float] = None) -> Dict[str, Any]:
        """Sidecar metadata describing how the final model was produced."""
        return {
            'variant': str(final_model.variant),
            'tag': list(final_model.variant.tag),
            'params': dataclasses.asdict(params),
            'n_samples': dataset.n_samples,
            'n_features': dataset.n_features,
            'training_time_sec': duration,
            'format_version': constants.MODEL_FORMAT_VERSION,
            'catalog_version': AlgorithmCatalog.VERSION,
            'sklearn_version': sklearn.__version__,
            'timestamp': time.strftime("%Y-%m-%d %H:%M:%S"),
        }
