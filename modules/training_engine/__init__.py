"""
Training Engine Module
======================

Responsibility:
- Retrains the winning variant on the full dataset.
- Serializes the fitted estimator behind a variant tag (FinalModel blob).
- Persists the blob and its training metadata (.json) when a results
  directory is configured.
"""

from .final_model import FinalModel
from .training_engine import TrainingEngine, NumpyEncoder

__all__ = ['FinalModel', 'TrainingEngine', 'NumpyEncoder']
