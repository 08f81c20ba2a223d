import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from modules.algorithm_catalog import Algorithm, Distance, Kernel, TaskKind
from modules.config_manager import ConfigurationManager
from modules.evaluation_engine import Metric
from utils.exceptions import ConfigurationError, MetricTaskMismatch

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "config" / "schema.json"


@pytest.fixture
def write_config(tmp_path):
    """Writes a configuration file and returns a manager bound to it."""
    def _write(content):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(content))
        return ConfigurationManager(str(config_path), str(SCHEMA_PATH))
    return _write


def test_load_valid_config(write_config):
    manager = write_config({
        "profile": "regression",
        "cross_validation": {"folds": 5, "shuffle": True, "seed": 3},
        "algorithms": {"KNNRegressor": {"k": 4, "distance": "mahalanobis"}},
        "skip": ["Lasso"],
    })
    config = manager.load_and_validate()
    settings = manager.build_settings(config)

    assert settings.number_of_folds == 5
    assert settings.shuffle is True and settings.seed == 3
    assert settings.is_skipped(Algorithm.LASSO)
    knn = settings.resolve(Algorithm.KNN_REGRESSOR)
    assert knn.k == 4 and knn.distance is Distance.MAHALANOBIS


def test_classification_profile_and_kernel(write_config):
    manager = write_config({
        "profile": "classification",
        "task": "classification",
        "sort_by": "Accuracy",
        "algorithms": {"SVC": {"kernel": "rbf", "C": 3.0}},
    })
    settings = manager.build_settings(manager.load_and_validate())

    assert settings.task_kind is TaskKind.CLASSIFICATION
    assert settings.sort_by is Metric.ACCURACY
    assert settings.resolve(Algorithm.SVC).kernel is Kernel.RBF


def test_include_enables_family_on_empty_profile(write_config):
    manager = write_config({
        "include": ["LinearRegression"],
        "algorithms": {"LinearRegression": {"fit_intercept": False}},
    })
    settings = manager.build_settings(manager.load_and_validate())

    assert not settings.is_skipped(Algorithm.LINEAR_REGRESSION)
    assert settings.is_skipped(Algorithm.RIDGE)


def test_list_values_become_tuples(write_config):
    manager = write_config({
        "profile": "classification",
        "algorithms": {"GaussianNaiveBayes": {"priors": [0.4, 0.6]}},
    })
    settings = manager.build_settings(manager.load_and_validate())
    assert settings.resolve(Algorithm.GAUSSIAN_NAIVE_BAYES).priors == (0.4, 0.6)


def test_outputs_enable_results_dir(write_config, tmp_path):
    manager = write_config({"outputs": {"save_models": True, "base_results_dir": str(tmp_path / "out")}})
    settings = manager.build_settings(manager.load_and_validate())
    assert settings.results_dir == str(tmp_path / "out")


@pytest.mark.parametrize("content,match", [
    ({"cross_validation": {"folds": 1}}, "Schema validation failed"),
    ({"profile": "clustering"}, "Schema validation failed"),
    ({"unexpected": True}, "Schema validation failed"),
    ({"sort_by": "F1"}, "Unknown metric"),
    ({"skip": ["GradientBoosting"]}, "Unknown algorithm"),
    ({"algorithms": {"Ridge": {"learning_rate": 0.1}}}, "Unknown parameters"),
    ({"algorithms": {"KNNRegressor": {"distance": "cosine"}}}, "Unknown distance"),
    ({"execution": {"n_jobs": 0}}, "n_jobs"),
])
def test_invalid_configs(write_config, content, match):
    with pytest.raises(ConfigurationError, match=match):
        write_config(content).load_and_validate()


def test_metric_task_mismatch(write_config):
    manager = write_config({"task": "regression", "sort_by": "Accuracy"})
    with pytest.raises(MetricTaskMismatch):
        manager.load_and_validate()


def test_missing_file(tmp_path):
    manager = ConfigurationManager(str(tmp_path / "nope.json"), str(SCHEMA_PATH))
    with pytest.raises(ConfigurationError, match="File not found"):
        manager.load_and_validate()


def test_invalid_json(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        ConfigurationManager(str(config_path), str(SCHEMA_PATH)).load_and_validate()


def test_worker_oversubscription_warns(write_config):
    manager = write_config({"execution": {"n_jobs": 64}})
    with patch('modules.config_manager.config_manager.psutil.cpu_count', return_value=2), \
         patch.object(manager, 'logger', spec=logging.Logger) as mock_logger:
        manager.load_and_validate()
    mock_logger.warning.assert_called_once()


def test_save_artifacts(write_config, tmp_path):
    manager = write_config({"profile": "regression"})
    manager.load_and_validate()
    manager.generate_run_id()
    manager.save_artifacts(str(tmp_path / "run"))

    assert (tmp_path / "run" / "config_used.json").exists()
    assert (tmp_path / "run" / "config_hash.txt").exists()
    metadata = json.loads((tmp_path / "run" / "run_metadata.json").read_text())
    assert metadata['run_id'] == manager.run_id


def test_shipped_config_is_valid():
    root = SCHEMA_PATH.parent
    manager = ConfigurationManager(str(root / "config.json"), str(SCHEMA_PATH))
    settings = manager.build_settings(manager.load_and_validate())
    assert settings.resolve(Algorithm.SVR).kernel is Kernel.RBF
