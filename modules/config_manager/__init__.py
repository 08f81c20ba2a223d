"""
Configuration Manager Module
============================

Responsibility:
- Immutable `Settings` (the Configuration Store) with canned regression and
  classification profiles, fluent per-family overrides and a skip list.
- Fail-fast resolution of per-family parameter records.
- Loading and validation of JSON configuration files into `Settings`.
"""

from .settings import Settings
from .config_manager import ConfigurationManager

__all__ = ['Settings', 'ConfigurationManager']
