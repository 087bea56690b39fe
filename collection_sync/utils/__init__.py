"""
Collection Sync Utilities

Logging setup and file primitives.

Author: Collection Sync Project
License: MIT
"""
