import logging
from typing import Iterable, Optional

import pandas as pd

from modules.base.base_engine import BaseEngine
from modules.comparison_engine import ComparisonEntry, RunSummary
from modules.config_manager import Settings
from modules.evaluation_engine import Metric
from utils import constants


def format_score(train: float, test: float, value: float) -> str:
    """Fixed-point for moderate magnitudes, scientific otherwise."""
    decider = abs((train + test) / 2.0)
    if 0.01 < decider < 1000.0:
        return f"{value:.2f}"
    return f"{value:.3e}"


def format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60.0:
        return f"{seconds:.2f}s"
    minutes, secs = divmod(seconds, 60.0)
    return f"{int(minutes)}m {secs:.0f}s"


class ReportingEngine(BaseEngine):
    """
    Builds read-only tabular snapshots of a comparison run.
    Tables are pandas DataFrames; rendering and saving are optional.
    """

    def __init__(self, settings: Settings, logger: logging.Logger):
        super().__init__(settings, logger)

    def _get_engine_directory_name(self) -> str:
        return constants.REPORTING_DIR

    @staticmethod
    def comparison_frame(entries: Iterable[ComparisonEntry], metric: Metric) -> pd.DataFrame:
        """Ledger snapshot in rank order: Model, Time, Training/Testing <metric>."""
        rows = []
        for entry in entries:
            train, test = entry.mean_train_score, entry.mean_test_score
            rows.append({
                'Model': str(entry.variant),
                'Time': format_duration(entry.duration),
                f'Training {metric}': format_score(train, test, train),
                f'Testing {metric}': format_score(train, test, test),
            })
        columns = ['Model', 'Time', f'Training {metric}', f'Testing {metric}']
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def settings_frame(settings: Settings) -> pd.DataFrame:
        """One row per setting, per-family parameters flattened as `Family.param`."""
        snapshot = settings.snapshot()
        rows = [
            {'Setting': key, 'Value': str(value)}
            for key, value in snapshot.items()
            if key not in ('params', 'skiplist')
        ]
        rows.append({'Setting': 'skiplist', 'Value': ", ".join(snapshot['skiplist']) or "None"})
        for family, params in snapshot['params'].items():
            for name, value in params.items():
                rows.append({'Setting': f'{family}.{name}', 'Value': str(value)})
        return pd.DataFrame(rows, columns=['Setting', 'Value'])

    @staticmethod
    def summary_frame(summary: RunSummary) -> pd.DataFrame:
        rows = [{'Model': str(v), 'Status': 'succeeded', 'Detail': ''} for v in summary.succeeded]
        rows += [{'Model': str(v), 'Status': 'failed', 'Detail': cause} for v, cause in summary.failed.items()]
        rows += [{'Model': str(a), 'Status': 'excluded', 'Detail': 'structural constraint'} for a in summary.excluded]
        rows += [{'Model': str(a), 'Status': 'skipped', 'Detail': 'skip list'} for a in summary.skipped]
        return pd.DataFrame(rows, columns=['Model', 'Status', 'Detail'])

    @staticmethod
    def render(frame: pd.DataFrame) -> str:
        if frame.empty:
            return "(no entries)"
        return frame.to_string(index=False)

    def execute(self, entries: Iterable[ComparisonEntry], settings: Settings,
                summary: Optional[RunSummary] = None) -> pd.DataFrame:
        """
        Build the comparison table and, when a results directory is set,
        save it alongside the settings snapshot.
        """
        frame = self.comparison_frame(entries, settings.sort_by)
        if self.output_dir is not None:
            frame.to_csv(self.output_dir / constants.COMPARISON_TABLE_FILE, index=False)
            self.settings_frame(settings).to_csv(self.output_dir / constants.SETTINGS_TABLE_FILE, index=False)
            if summary is not None:
                self.summary_frame(summary).to_csv(self.output_dir / constants.RUN_SUMMARY_FILE, index=False)
            self.logger.info(f"Comparison reports saved to {self.output_dir}")
        return frame
