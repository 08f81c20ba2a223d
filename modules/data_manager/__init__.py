"""
Data Manager Module
===================

Responsibility:
- Immutable `Dataset` (feature matrix + target vector) with validation.
- Task-kind inference from the target values.
- Loading from in-memory arrays, pandas DataFrames and CSV files.
"""

from .data_manager import DataManager, Dataset

__all__ = ['DataManager', 'Dataset']
