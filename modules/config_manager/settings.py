"""
The Configuration Store.

`Settings` is an immutable value: every builder returns a new instance, so a
comparison run can never observe a configuration change half-way through.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from modules.algorithm_catalog import Algorithm, AlgorithmCatalog, TaskKind
from modules.evaluation_engine import Metric
from utils import constants
from utils.exceptions import MissingConfiguration


def _default_params(task_kind: TaskKind) -> Dict[Algorithm, Any]:
    return {
        a: AlgorithmCatalog.entry(a).params_type()
        for a in AlgorithmCatalog.algorithms(task_kind)
    }


@dataclass(frozen=True)
class Settings:
    """Global comparison controls plus one optional parameter record per family."""

    sort_by: Metric = Metric.R_SQUARED
    task_kind: Optional[TaskKind] = None
    skiplist: Tuple[Algorithm, ...] = AlgorithmCatalog.algorithms()
    number_of_folds: int = constants.DEFAULT_NUMBER_OF_FOLDS
    shuffle: bool = False
    seed: int = constants.DEFAULT_SHUFFLE_SEED
    n_jobs: int = 1
    variant_n_jobs: int = 1
    verbose: bool = False
    results_dir: Optional[str] = None
    params: Mapping[Algorithm, Any] = field(default_factory=dict)

    # --- Canned profiles ---

    @classmethod
    def default_regression(cls) -> "Settings":
        """Regression families enabled with default parameters, classifiers skipped."""
        return cls(
            sort_by=Metric.R_SQUARED,
            task_kind=TaskKind.REGRESSION,
            skiplist=AlgorithmCatalog.algorithms(TaskKind.CLASSIFICATION),
            params=_default_params(TaskKind.REGRESSION),
        )

    @classmethod
    def default_classification(cls) -> "Settings":
        """Classification families enabled with default parameters, regressors skipped."""
        return cls(
            sort_by=Metric.ACCURACY,
            task_kind=TaskKind.CLASSIFICATION,
            skiplist=AlgorithmCatalog.algorithms(TaskKind.REGRESSION),
            params=_default_params(TaskKind.CLASSIFICATION),
        )

    # --- Builders ---

    def with_number_of_folds(self, n: int) -> "Settings":
        return dataclasses.replace(self, number_of_folds=n)

    def shuffle_data(self, shuffle: bool, seed: Optional[int] = None) -> "Settings":
        return dataclasses.replace(
            self, shuffle=shuffle, seed=self.seed if seed is None else seed
        )

    def with_n_jobs(self, n_jobs: int, variant_n_jobs: Optional[int] = None) -> "Settings":
        return dataclasses.replace(
            self,
            n_jobs=n_jobs,
            variant_n_jobs=self.variant_n_jobs if variant_n_jobs is None else variant_n_jobs,
        )

    def with_verbose(self, verbose: bool) -> "Settings":
        return dataclasses.replace(self, verbose=verbose)

    def with_results_dir(self, results_dir: Optional[str]) -> "Settings":
        return dataclasses.replace(self, results_dir=results_dir)

    def with_task_kind(self, task_kind: Optional[TaskKind]) -> "Settings":
        return dataclasses.replace(self, task_kind=task_kind)

    def sorted_by(self, metric: Metric) -> "Settings":
        return dataclasses.replace(self, sort_by=metric)

    def skip(self, algorithm: Algorithm) -> "Settings":
        if algorithm in self.skiplist:
            return self
        return dataclasses.replace(self, skiplist=self.skiplist + (algorithm,))

    def include(self, algorithm: Algorithm) -> "Settings":
        """Remove `algorithm` from the skip list."""
        return dataclasses.replace(
            self, skiplist=tuple(a for a in self.skiplist if a != algorithm)
        )

    def with_params(self, params) -> "Settings":
        """
        Store a parameter record. The record type selects the family.
        The family's skip-list membership is left unchanged.
        """
        algorithm = AlgorithmCatalog.entry_for_params(params).algorithm
        updated = dict(self.params)
        updated[algorithm] = params
        return dataclasses.replace(self, params=updated)

    # --- Resolution ---

    def is_skipped(self, algorithm: Algorithm) -> bool:
        return algorithm in self.skiplist

    def resolve(self, algorithm: Algorithm):
        """Return the parameter record for `algorithm` or raise MissingConfiguration."""
        params = self.params.get(algorithm)
        if params is None:
            raise MissingConfiguration(algorithm)
        return params

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the active configuration for reporting."""
        return {
            'sort_by': str(self.sort_by),
            'task_kind': str(self.task_kind) if self.task_kind else None,
            'number_of_folds': self.number_of_folds,
            'shuffle': self.shuffle,
            'seed': self.seed,
            'n_jobs': self.n_jobs,
            'variant_n_jobs': self.variant_n_jobs,
            'skiplist': [str(a) for a in self.skiplist],
            'params': {
                str(a): dataclasses.asdict(p)
                for a, p in self.params.items()
                if p is not None
            },
        }
