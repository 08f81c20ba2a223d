import logging
from unittest.mock import MagicMock

import numpy as np
import pytest
from sklearn.datasets import make_regression

from modules.algorithm_catalog import (
    Algorithm,
    AlgorithmCatalog,
    Distance,
    KNNRegressorParameters,
    Kernel,
    LinearRegressionParameters,
    SVRParameters,
    VariantIdentifier,
)
from modules.config_manager import Settings
from modules.data_manager import Dataset
from modules.prediction_engine import PredictionEngine
from modules.training_engine import FinalModel, TrainingEngine
from utils.exceptions import (
    DataValidationError,
    DispatchError,
    ModelFormatError,
    ShapeMismatch,
    TagMismatch,
    UnknownVariantTag,
)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def dataset():
    X, y = make_regression(n_samples=40, n_features=3, noise=0.1, random_state=2)
    return Dataset.from_arrays(X, y)


@pytest.fixture
def engine(mock_logger):
    return PredictionEngine(Settings(), mock_logger)


def _commit(dataset, mock_logger, algorithm, params):
    winner = AlgorithmCatalog.identify(algorithm, params)
    return TrainingEngine(Settings(), mock_logger).execute(dataset, winner, params)


def test_every_family_has_an_arm():
    assert set(PredictionEngine.ARMS) == set(Algorithm)


def test_predictions_are_repeatable(dataset, engine, mock_logger):
    first = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())
    second = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())

    a = engine.execute(first, dataset.x)
    b = engine.execute(FinalModel.from_bytes(second.to_bytes()), dataset.x)

    assert a.shape == (40,)
    np.testing.assert_array_equal(a, b)


def test_single_row_input(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())
    assert engine.execute(final_model, dataset.x[0]).shape == (1,)


def test_shape_mismatch(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())

    with pytest.raises(ShapeMismatch) as exc_info:
        engine.execute(final_model, np.zeros((2, 4)))
    assert (exc_info.value.expected, exc_info.value.actual) == (3, 4)


def test_non_numeric_input(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())
    with pytest.raises(DataValidationError):
        engine.execute(final_model, [["a", "b", "c"]])
    with pytest.raises(DataValidationError):
        engine.execute(final_model, np.zeros((2, 3, 1)))


def test_swapped_family_tag_rejected(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())
    forged = FinalModel(VariantIdentifier(Algorithm.RIDGE), final_model.n_features, final_model.payload)

    with pytest.raises(TagMismatch):
        engine.execute(forged, dataset.x)


def test_swapped_distance_tag_rejected(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.KNN_REGRESSOR,
                          KNNRegressorParameters(distance=Distance.MANHATTAN))
    forged = FinalModel(VariantIdentifier(Algorithm.KNN_REGRESSOR, Distance.EUCLIDEAN),
                        final_model.n_features, final_model.payload)

    assert engine.execute(final_model, dataset.x[:2]).shape == (2,)
    with pytest.raises(TagMismatch, match="manhattan"):
        engine.execute(forged, dataset.x)


def test_swapped_kernel_tag_rejected_through_bytes(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.SVR, SVRParameters(kernel=Kernel.RBF))
    blob = bytearray(final_model.to_bytes())
    blob[7] = Kernel.LINEAR.value

    corrupted = FinalModel.from_bytes(bytes(blob))
    with pytest.raises(DispatchError):
        engine.execute(corrupted, dataset.x)


def test_mahalanobis_model_predicts(dataset, engine, mock_logger):
    final_model = _commit(dataset, mock_logger, Algorithm.KNN_REGRESSOR,
                          KNNRegressorParameters(distance=Distance.MAHALANOBIS))
    predictions = engine.execute(FinalModel.from_bytes(final_model.to_bytes()), dataset.x)
    assert np.isfinite(predictions).all()


def test_unregistered_arm(dataset, engine, mock_logger, monkeypatch):
    final_model = _commit(dataset, mock_logger, Algorithm.LINEAR_REGRESSION, LinearRegressionParameters())
    arms = dict(PredictionEngine.ARMS)
    del arms[Algorithm.LINEAR_REGRESSION]
    monkeypatch.setattr(PredictionEngine, 'ARMS', arms)

    with pytest.raises(UnknownVariantTag):
        engine.execute(final_model, dataset.x)


def test_garbage_payload(engine):
    final_model = FinalModel(VariantIdentifier(Algorithm.LINEAR_REGRESSION), 3, b"not a pickle")
    with pytest.raises(ModelFormatError):
        engine.execute(final_model, np.zeros((1, 3)))
