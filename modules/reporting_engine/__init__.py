"""
Reporting Module.

Responsible for read-only tabular snapshots of the comparison ledger,
the active settings and the run summary.
"""

from .reporting_engine import ReportingEngine, format_score, format_duration

__all__ = [
    'ReportingEngine',
    'format_score',
    'format_duration',
]
