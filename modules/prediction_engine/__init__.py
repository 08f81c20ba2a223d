"""
Prediction Engine Module
========================

Responsibility:
- Dispatches a tagged FinalModel to the matching predictor arm.
- Rejects tag/payload disagreements and input shape mismatches.
"""

from .prediction_engine import PredictionEngine

__all__ = ['PredictionEngine']
