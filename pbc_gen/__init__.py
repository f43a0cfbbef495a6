"""
pbc-gen: typed Go models from PocketBase schema exports.
"""

__version__ = "0.1.0"
