"""
Comparison Module
=================

Responsibility:
- Thread-safe ledger of cross-validation results.
- Deterministic ranking by the active metric with catalog-order tie-break.
- Per-run summary of succeeded / skipped / excluded / failed variants.
"""

from .comparison_ledger import ComparisonEntry, ComparisonLedger
from .run_summary import RunSummary

__all__ = ['ComparisonEntry', 'ComparisonLedger', 'RunSummary']
