import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from modules.algorithm_catalog import TaskKind
from utils.exceptions import DataValidationError
from utils import constants


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Dataset:
    """
    Immutable feature matrix / target vector pair.

    Both arrays are private read-only copies; folds only ever index into them.
    """
    x: np.ndarray
    y: np.ndarray

    @classmethod
    def from_arrays(cls, x, y) -> "Dataset":
        try:
            x_arr = np.asarray(x, dtype=float)
            y_arr = np.asarray(y, dtype=float)
        except (TypeError, ValueError) as e:
            raise DataValidationError(f"Features and target must be numeric and rectangular: {e}")

        if x_arr.ndim != 2:
            raise DataValidationError(f"Feature matrix must be 2-dimensional, got {x_arr.ndim} dimension(s).")
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr[:, 0]
        if y_arr.ndim != 1:
            raise DataValidationError("Target must be a single column.")
        if x_arr.shape[1] < 1:
            raise DataValidationError("Feature matrix must have at least one column.")
        if x_arr.shape[0] != y_arr.shape[0]:
            raise DataValidationError(
                f"Row count mismatch: {x_arr.shape[0]} feature rows vs {y_arr.shape[0]} targets."
            )
        if x_arr.shape[0] < 2:
            raise DataValidationError("At least two samples are required.")
        if not (np.isfinite(x_arr).all() and np.isfinite(y_arr).all()):
            raise DataValidationError("Features and target must not contain NaN or infinite values.")

        return cls(_read_only(x_arr), _read_only(y_arr))

    @property
    def n_samples(self) -> int:
        return self.x.shape[0]

    @property
    def n_features(self) -> int:
        return self.x.shape[1]

    @property
    def number_of_classes(self) -> int:
        return int(np.unique(self.y).size)

    def infer_task_kind(self) -> TaskKind:
        """
        Classification when every target is integer-valued and there are few
        distinct values, otherwise regression.
        """
        integral = bool(np.all(np.equal(np.mod(self.y, 1), 0)))
        if integral and self.number_of_classes <= constants.MAX_INFERRED_CLASSES:
            return TaskKind.CLASSIFICATION
        return TaskKind.REGRESSION


class DataManager:
    """
    Loads tabular data into an immutable `Dataset`.
    Performs no transformation beyond numeric conversion and validation.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def from_dataframe(self, df: pd.DataFrame, target: Union[str, int]) -> Dataset:
        """Split a DataFrame into features and the `target` column (name or position)."""
        target_name = df.columns[target] if isinstance(target, int) else target
        if target_name not in df.columns:
            raise DataValidationError(f"Target column '{target_name}' not found. Columns: {list(df.columns)}")

        features = df.drop(columns=[target_name])
        non_numeric = [c for c in features.columns if not pd.api.types.is_numeric_dtype(features[c])]
        if non_numeric or not pd.api.types.is_numeric_dtype(df[target_name]):
            raise DataValidationError(f"Non-numeric columns are not supported: {non_numeric or [target_name]}")

        self.logger.info(f"Loaded {len(df)} rows with {features.shape[1]} features (target: '{target_name}').")
        return Dataset.from_arrays(features.to_numpy(dtype=float), df[target_name].to_numpy(dtype=float))

    def from_csv(self, file_path: Union[str, Path], target: Union[str, int], header: bool = True) -> Dataset:
        """Read a CSV file and build a `Dataset` from it."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise DataValidationError(f"Data file not found: {file_path}")

        self.logger.info(f"Loading data from {file_path}")
        try:
            df = pd.read_csv(file_path, header=0 if header else None)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DataValidationError(f"Failed to parse {file_path}: {e}")

        if not header and isinstance(target, str):
            raise DataValidationError("Headerless files require the target as a column index.")
        return self.from_dataframe(df, target)
