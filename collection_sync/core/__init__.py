"""
Collection Sync Core Module

Run orchestration and console reporting.

Author: Collection Sync Project
License: MIT
"""

from .sync_engine import SyncEngine, SyncResult, SyncStatus

__all__ = ['SyncEngine', 'SyncResult', 'SyncStatus']
