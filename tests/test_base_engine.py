import logging
from unittest.mock import MagicMock

import pytest

from modules.base.base_engine import BaseEngine
from modules.config_manager import Settings


# Concrete implementation for testing purposes
class ConcreteTestEngine(BaseEngine):
    def __init__(self, settings, logger, engine_dir_name):
        self._engine_dir_name_value = engine_dir_name
        super().__init__(settings, logger)

    def _get_engine_directory_name(self):
        return self._engine_dir_name_value

    def execute(self, *args, **kwargs):
        pass


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


def test_directory_created_with_results_dir(mock_logger, tmp_path):
    engine = ConcreteTestEngine(Settings().with_results_dir(str(tmp_path)), mock_logger, "03_TEST")

    expected_dir = tmp_path / "03_TEST"
    assert engine.output_dir == expected_dir
    assert expected_dir.is_dir()
    mock_logger.info.assert_called_with(f"Output directory for ConcreteTestEngine: {expected_dir}")


def test_no_directory_without_results_dir(mock_logger):
    engine = ConcreteTestEngine(Settings(), mock_logger, "03_TEST")

    assert engine.output_dir is None
    mock_logger.info.assert_not_called()


def test_engine_without_artifacts(mock_logger, tmp_path):
    engine = ConcreteTestEngine(Settings().with_results_dir(str(tmp_path)), mock_logger, None)

    assert engine.output_dir is None
    assert list(tmp_path.iterdir()) == []


def test_cannot_instantiate_abstract_engine(mock_logger):
    with pytest.raises(TypeError):
        BaseEngine(Settings(), mock_logger)
