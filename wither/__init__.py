"""Model declarations, concern specifications and index synchronization for MongoDB."""

__version__ = "0.10.0"