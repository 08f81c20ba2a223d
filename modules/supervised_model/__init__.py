"""
Supervised Model Module
=======================

Responsibility:
- Pre-flight configuration checks.
- Parallel comparison of eligible variants into a ranked ledger.
- Final retraining of the winner and prediction through the tagged model.
"""

from .supervised_model import EngineState, SupervisedModel

__all__ = ['EngineState', 'SupervisedModel']
