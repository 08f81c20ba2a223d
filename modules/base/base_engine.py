import abc
import logging
from pathlib import Path
from typing import Any, Optional

from modules.config_manager import Settings


class BaseEngine(abc.ABC):
    """
    Abstract base class for all processing engines.

    Provides common functionality for:
    - Settings and logger attachment.
    - Output directory management when the run persists artifacts.
    """

    def __init__(self, settings: Settings, logger: logging.Logger):
        self.settings = settings
        self.logger = logger
        self.base_dir = Path(settings.results_dir) if settings.results_dir else None
        self.engine_dir_name = self._get_engine_directory_name()

        self.output_dir: Optional[Path] = None
        if self.base_dir is not None and self.engine_dir_name:
            self.output_dir = self.base_dir / self.engine_dir_name

        self._setup_directories()

    @abc.abstractmethod
    def _get_engine_directory_name(self) -> Optional[str]:
        """
        Determines the directory name for the engine's output, or None when
        the engine never writes artifacts.
        """
        raise NotImplementedError("Subclasses must implement _get_engine_directory_name.")

    def _setup_directories(self):
        """
        Creates the engine's output directory if artifacts are persisted.
        """
        if self.output_dir is None:
            return

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Output directory for {self.__class__.__name__}: {self.output_dir}")

    @abc.abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """
        Main execution method for the engine.
        This must be implemented by all subclasses.
        """
        pass
