"""
Fold partitioning for cross-validation.

Every row index lands in exactly one test fold. Without shuffling the folds
are contiguous blocks; with shuffling the indices are permuted by a seeded
generator so repeated runs see identical folds.
"""
import logging
from typing import List, Optional, Tuple

import numpy as np
from sklearn.model_selection import KFold

from modules.base.base_engine import BaseEngine
from modules.config_manager import Settings
from utils.exceptions import ConfigurationError

Fold = Tuple[np.ndarray, np.ndarray]


class SplitEngine(BaseEngine):
    """Builds the K-fold train/test index pairs shared by every variant."""

    def __init__(self, settings: Settings, logger: logging.Logger):
        super().__init__(settings, logger)

    def _get_engine_directory_name(self) -> Optional[str]:
        return None

    def execute(self, n_samples: int) -> List[Fold]:
        """
        Partition `n_samples` row indices into `settings.number_of_folds` folds.

        Returns:
            List of (train_indices, test_indices) pairs, in fold order.
        """
        n_splits = self.settings.number_of_folds
        if n_splits < 2:
            raise ConfigurationError(f"number_of_folds must be >= 2, got {n_splits}.")
        if n_splits > n_samples:
            raise ConfigurationError(
                f"number_of_folds ({n_splits}) cannot exceed the number of samples ({n_samples})."
            )

        if self.settings.shuffle:
            cv = KFold(n_splits=n_splits, shuffle=True, random_state=self.settings.seed)
        else:
            cv = KFold(n_splits=n_splits, shuffle=False)

        folds = list(cv.split(np.zeros((n_samples, 1))))
        self.logger.debug(
            f"Built {len(folds)} folds over {n_samples} samples "
            f"(shuffle={self.settings.shuffle}, seed={self.settings.seed})"
        )
        return folds
