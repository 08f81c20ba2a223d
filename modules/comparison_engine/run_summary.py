from dataclasses import dataclass, field
from typing import Dict, Tuple

from modules.algorithm_catalog import Algorithm, VariantIdentifier


@dataclass(frozen=True)
class RunSummary:
    """
    Outcome of one comparison run, kept distinct per category:
    skipped by policy, excluded by a structural constraint, failed with an
    error, or succeeded.
    """
    succeeded: Tuple[VariantIdentifier, ...] = ()
    skipped: Tuple[Algorithm, ...] = ()
    excluded: Tuple[Algorithm, ...] = ()
    failed: Dict[VariantIdentifier, str] = field(default_factory=dict)

    def status_of(self, algorithm: Algorithm) -> str:
        if algorithm in self.skipped:
            return "skipped"
        if algorithm in self.excluded:
            return "excluded"
        if any(v.algorithm == algorithm for v in self.failed):
            return "failed"
        if any(v.algorithm == algorithm for v in self.succeeded):
            return "succeeded"
        return "not applicable"
