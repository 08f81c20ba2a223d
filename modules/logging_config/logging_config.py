import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, init

from utils import constants

init(autoreset=True)

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
FILE_LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(threadName)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Colours the level name on the console only."""
    COLORS = {
        'DEBUG': Fore.WHITE + Style.DIM,
        'INFO': Fore.CYAN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Style.BRIGHT,
    }
    RESET = Style.RESET_ALL

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
        return super().format(record)


class LoggingConfigurator:
    """
    Installs the handlers for one AutoML run from the `logging` config section.

    Variant and fold evaluations run on worker threads, so the file format
    carries the thread name. Python warnings raised while fitting (sklearn
    convergence or ill-defined metric warnings) are routed into the same
    handlers unless `capture_warnings` is off.
    """

    def __init__(self, config: dict, log_dir: Optional[str] = None):
        self.config = config.get('logging', {})
        self.log_level = getattr(logging, self.config.get('level', 'INFO').upper())
        self.log_dir = Path(log_dir or self.config.get('log_dir', constants.LOG_DIR))
        self.max_bytes = self.config.get('max_log_bytes', constants.LOG_MAX_BYTES)
        self.backup_count = self.config.get('log_backups', constants.LOG_BACKUP_COUNT)

    def setup(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers = []

        if self.config.get('log_to_console', True):
            if sys.platform == 'win32':
                sys.stdout.reconfigure(encoding='utf-8')

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.log_level)
            formatter_cls = ColoredFormatter if self.config.get('colorful_console', True) else logging.Formatter
            console_handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(console_handler)

        if self.config.get('log_to_file', True):
            self.log_dir.mkdir(parents=True, exist_ok=True)
            root_logger.addHandler(self._file_handler())

        logging.captureWarnings(self.config.get('capture_warnings', True))

    def _file_handler(self) -> RotatingFileHandler:
        handler = RotatingFileHandler(
            self.log_dir / constants.LOG_FILE,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8',
        )
        # The file keeps per-fold debug detail even when the console is quieter.
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Logger under the project namespace, e.g. `automl.cli`."""
        if not name or name == constants.LOGGER_NAMESPACE:
            return logging.getLogger(constants.LOGGER_NAMESPACE)
        return logging.getLogger(f"{constants.LOGGER_NAMESPACE}.{name}")
