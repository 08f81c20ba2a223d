import io

import joblib
from sklearn.base import BaseEstimator

from utils.exceptions import ModelFormatError


def safe_load_model(payload: bytes) -> BaseEstimator:
    """Deserialize a joblib payload and check it holds an estimator."""
    try:
        model = joblib.load(io.BytesIO(payload))
    except Exception as e:
        raise ModelFormatError(f"Failed to load model payload: {e}") from e
    if not isinstance(model, BaseEstimator):
        raise ModelFormatError(f"Invalid model type: {type(model).__name__}")
    return model
