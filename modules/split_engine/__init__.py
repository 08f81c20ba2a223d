"""
Split Engine
============

Responsibility:
- Deterministic K-fold partitioning (contiguous or seeded shuffle).
"""

from .split_engine import SplitEngine

__all__ = ['SplitEngine']
