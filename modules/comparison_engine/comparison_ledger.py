import math
import threading
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from modules.algorithm_catalog import AlgorithmCatalog, VariantIdentifier
from modules.cross_validation_engine import CrossValidationResult
from modules.evaluation_engine import Metric
from utils.exceptions import EmptyLedger


@dataclass(frozen=True)
class ComparisonEntry:
    variant: VariantIdentifier
    result: CrossValidationResult
    duration: float

    @property
    def mean_train_score(self) -> float:
        return self.result.mean_train_score

    @property
    def mean_test_score(self) -> float:
        return self.result.mean_test_score


class ComparisonLedger:
    """
    Ranked collection of per-variant comparison results.

    The order depends only on (score, catalog declaration order), never on
    insertion order, so concurrent recording yields the same ranking as a
    sequential run. Accuracy and R^2 are maximised; MSE and MAE minimised.
    """

    def __init__(self, metric: Metric):
        self.metric = metric
        self._entries: List[ComparisonEntry] = []
        self._lock = threading.Lock()

    def _sort_key(self, entry: ComparisonEntry) -> Tuple[bool, float, int]:
        score = entry.mean_test_score
        is_nan = math.isnan(score)
        signed = 0.0 if is_nan else (-score if self.metric.greater_is_better else score)
        return is_nan, signed, AlgorithmCatalog.declaration_index(entry.variant.algorithm)

    def record(self, variant: VariantIdentifier, result: CrossValidationResult,
               duration: float) -> ComparisonEntry:
        """Append a result and re-sort."""
        entry = ComparisonEntry(variant, result, duration)
        with self._lock:
            self._entries.append(entry)
            self._entries.sort(key=self._sort_key)
        return entry

    def best(self) -> ComparisonEntry:
        with self._lock:
            if not self._entries:
                raise EmptyLedger("No variant was evaluated successfully; nothing to rank.")
            return self._entries[0]

    def entries(self) -> Tuple[ComparisonEntry, ...]:
        """Read-only snapshot in rank order."""
        with self._lock:
            return tuple(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ComparisonEntry]:
        return iter(self.entries())

    def __getitem__(self, index: int) -> ComparisonEntry:
        return self.entries()[index]
