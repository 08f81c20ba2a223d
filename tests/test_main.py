import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_regression

import main
from modules.training_engine import FinalModel

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "config" / "schema.json"


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    X, y = make_regression(n_samples=40, n_features=3, noise=0.1, random_state=0)
    df = pd.DataFrame(X, columns=["a", "b", "c"])
    df["y"] = y
    df.to_csv(tmp_path / "train.csv", index=False)
    df[["a", "b", "c"]].head(5).to_csv(tmp_path / "score.csv", index=False)

    config = {
        "profile": "empty",
        "include": ["LinearRegression", "Ridge"],
        "algorithms": {"LinearRegression": {}, "Ridge": {"alpha": 0.5}},
        "cross_validation": {"folds": 4},
        "logging": {"level": "INFO", "log_to_file": False, "log_to_console": False},
    }
    (tmp_path / "config.json").write_text(json.dumps(config))
    return tmp_path


def _args(workspace, *extra):
    return ["--config", str(workspace / "config.json"), "--schema", str(SCHEMA_PATH), *extra]


def test_train_then_predict(workspace, capsys):
    model_path = workspace / "model.aml"

    code = main.main(_args(workspace, "--data", "train.csv", "--target", "y", "--output", str(model_path)))
    assert code == 0
    assert FinalModel.load(model_path).n_features == 3
    assert "Testing R^2" in capsys.readouterr().out

    code = main.main(_args(workspace, "--predict", "score.csv", "--model", str(model_path)))
    assert code == 0
    lines = [l for l in capsys.readouterr().out.splitlines() if l.strip()]
    predictions = np.array([float(v) for v in lines[-5:]])
    assert predictions.shape == (5,)


def test_dry_run(workspace, capsys):
    assert main.main(_args(workspace, "--dry-run")) == 0
    assert "validated" in capsys.readouterr().out


def test_known_errors_exit_with_one(workspace):
    assert main.main(_args(workspace)) == 1
    assert main.main(_args(workspace, "--predict", "score.csv")) == 1
    assert main.main(["--config", str(workspace / "missing.json"), "--schema", str(SCHEMA_PATH)]) == 1


def test_missing_prediction_input_exits_with_one(workspace):
    model_path = workspace / "model.aml"
    assert main.main(_args(workspace, "--data", "train.csv", "--target", "y", "--output", str(model_path))) == 0

    code = main.main(_args(workspace, "--predict", "absent.csv", "--model", str(model_path)))
    assert code == 1


def test_parse_target():
    assert main.parse_target("3") == 3
    assert main.parse_target("-1") == -1
    assert main.parse_target("y") == "y"
