"""
Collection Sync

Reorganizes a target file collection to match the folder layout of a
source collection, moving files that match in name and size instead of
copying them.

Author: Collection Sync Project
License: MIT
"""

__version__ = "0.1.0"
