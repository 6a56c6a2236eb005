"""
Object storage actions against S3-compatible backends.

Config resolution and URL building live here alongside the action
handlers. Import `actions` explicitly; it pulls in the boto3 client.
"""

from .config import ConnectionOptions, resolve_storage_config
from .errors import (
    ActionError,
    BackendError,
    FileAccessError,
    UnknownActionError,
    ValidationError,
)
from .models import (
    AddressingMode,
    Credentials,
    ObjectDescriptor,
    ObjectLocator,
    StorageConfig,
    UploadedFile,
)
from .urls import build_file_url, object_url

__all__ = [
    "ActionError",
    "AddressingMode",
    "BackendError",
    "ConnectionOptions",
    "Credentials",
    "FileAccessError",
    "ObjectDescriptor",
    "ObjectLocator",
    "StorageConfig",
    "UnknownActionError",
    "UploadedFile",
    "ValidationError",
    "build_file_url",
    "object_url",
    "resolve_storage_config",
]
