"""
Custom exception hierarchy for the supervised model-selection engine.
"""


class AutoMLException(Exception):
    """Base exception for all system errors."""
    pass


class ConfigurationError(AutoMLException):
    """Configuration validation failed."""
    pass


class MissingConfiguration(ConfigurationError):
    """An eligible, non-skipped algorithm has no parameter record."""

    def __init__(self, algorithm):
        self.algorithm = algorithm
        super().__init__(
            f"No parameters configured for {algorithm}. "
            f"Provide them with Settings.with_params(...) or skip the algorithm."
        )


class MetricTaskMismatch(ConfigurationError):
    """The ranking metric cannot score the current task kind."""

    def __init__(self, metric, task_kind):
        self.metric = metric
        self.task_kind = task_kind
        super().__init__(f"Metric {metric} cannot be used for {task_kind} tasks.")


class DataValidationError(AutoMLException):
    """Data validation failed."""
    pass


class VariantEvaluationFailed(AutoMLException):
    """Cross-validation of a single variant failed; the variant is dropped."""

    def __init__(self, variant, cause):
        self.variant = variant
        self.cause = cause
        super().__init__(f"Evaluation of {variant} failed: {cause}")


class EvaluationCancelled(VariantEvaluationFailed):
    """Evaluation was cancelled between folds."""

    def __init__(self, variant):
        super().__init__(variant, "cancelled")


class EmptyLedger(AutoMLException):
    """No variant survived comparison."""
    pass


class FinalTrainingFailed(AutoMLException):
    """Retraining the winning variant on the full dataset failed."""

    def __init__(self, variant, cause):
        self.variant = variant
        self.cause = cause
        super().__init__(f"Final training of {variant} failed: {cause}")


class DispatchError(AutoMLException):
    """A stored final model could not be dispatched to a predictor."""
    pass


class UnknownVariantTag(DispatchError):
    """The model tag does not name any catalog variant."""
    pass


class TagMismatch(DispatchError):
    """The model tag disagrees with the serialized estimator."""
    pass


class ShapeMismatch(DispatchError):
    """Prediction input has a different number of columns than the training data."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} feature columns, got {actual}.")


class NoFinalModel(DispatchError):
    """Prediction was requested before a final model was committed."""
    pass


class ModelFormatError(DispatchError):
    """The model blob is corrupt or uses an unsupported format version."""
    pass
