"""
Evaluation Module
=================

Responsibility:
- Ranking metrics and their optimisation direction.
- Metric / task-kind compatibility checks.
"""

from .metrics import Metric, check_metric_task

__all__ = ['Metric', 'check_metric_task']
