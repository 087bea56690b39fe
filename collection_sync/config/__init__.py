"""
Collection Sync Configuration Module

Loads and validates settings from an optional YAML file, environment
variables and command-line overrides.

Author: Collection Sync Project
License: MIT
"""

from .schema import Config, LoggingConfig, LogLevel, SyncOptions
from .config_loader import ConfigLoader, load_config

__all__ = ['Config', 'LoggingConfig', 'LogLevel', 'SyncOptions', 'ConfigLoader', 'load_config']
