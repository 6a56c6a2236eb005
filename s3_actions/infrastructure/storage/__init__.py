"""
Object storage integration.

S3-compatible client built per call from a resolved StorageConfig.
"""

from .client import ObjectStore, S3ObjectStore, create_object_store

__all__ = ["ObjectStore", "S3ObjectStore", "create_object_store"]
