from enum import Enum

import numpy as np
from sklearn.metrics import accuracy_score, mean_absolute_error, mean_squared_error, r2_score

from modules.algorithm_catalog import TaskKind
from utils.exceptions import MetricTaskMismatch


class Metric(Enum):
    """Ranking metrics. Each is valid for exactly one task kind."""
    ACCURACY = "Accuracy"
    MEAN_SQUARED_ERROR = "MeanSquaredError"
    MEAN_ABSOLUTE_ERROR = "MeanAbsoluteError"
    R_SQUARED = "RSquared"

    def __str__(self) -> str:
        return _LABELS[self]

    @property
    def task_kind(self) -> TaskKind:
        return TaskKind.CLASSIFICATION if self is Metric.ACCURACY else TaskKind.REGRESSION

    @property
    def greater_is_better(self) -> bool:
        return self in (Metric.ACCURACY, Metric.R_SQUARED)

    def score(self, y_true, y_pred) -> float:
        return float(_SCORERS[self](np.asarray(y_true), np.asarray(y_pred)))

    @classmethod
    def from_name(cls, name: str) -> "Metric":
        for metric in cls:
            if name in (metric.value, metric.name, _LABELS[metric]):
                return metric
        raise ValueError(f"Unknown metric: {name}. Available: {[m.value for m in cls]}")


_LABELS = {
    Metric.ACCURACY: "Accuracy",
    Metric.MEAN_SQUARED_ERROR: "MSE",
    Metric.MEAN_ABSOLUTE_ERROR: "MAE",
    Metric.R_SQUARED: "R^2",
}

_SCORERS = {
    Metric.ACCURACY: accuracy_score,
    Metric.MEAN_SQUARED_ERROR: mean_squared_error,
    Metric.MEAN_ABSOLUTE_ERROR: mean_absolute_error,
    Metric.R_SQUARED: r2_score,
}


def check_metric_task(metric: Metric, task_kind: TaskKind) -> None:
    """Raise MetricTaskMismatch when `metric` cannot score `task_kind`."""
    if metric.task_kind != task_kind:
        raise MetricTaskMismatch(metric, task_kind)
