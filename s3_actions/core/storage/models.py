"""
Domain models for object storage actions.

These are plain values with no knowledge of boto3 or HTTP. A
StorageConfig is built fresh for every action call and never cached.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


DEFAULT_REGION = "us-east-1"
DEFAULT_PROVIDER = "aws"
CUSTOM_PROVIDER = "custom"


class AddressingMode(Enum):
    """How the bucket appears in an object URL."""
    PATH_STYLE = "path"          # endpoint/bucket/key
    VIRTUAL_HOSTED = "virtual"   # bucket.endpoint/key


def addressing_mode(force_path_style: bool, provider: str) -> AddressingMode:
    """Custom providers always use path style; AWS only when forced."""
    if force_path_style or provider == CUSTOM_PROVIDER:
        return AddressingMode.PATH_STYLE
    return AddressingMode.VIRTUAL_HOSTED


@dataclass(frozen=True)
class Credentials:
    """Static access key pair supplied with each call."""
    access_key_id: str
    secret_access_key: str

    def __repr__(self) -> str:
        # keep secrets out of logs and tracebacks
        return f"Credentials(access_key_id={self.access_key_id!r}, secret_access_key='***')"


@dataclass(frozen=True)
class StorageConfig:
    """
    Resolved connection settings for one action call.

    `endpoint` is always set: either the AWS regional endpoint derived
    from `region`, or the caller's override when the provider is custom.
    """
    region: str
    credentials: Credentials
    endpoint: str
    force_path_style: bool = False
    provider: str = DEFAULT_PROVIDER

    @property
    def is_custom(self) -> bool:
        return self.provider == CUSTOM_PROVIDER

    @property
    def addressing_mode(self) -> AddressingMode:
        return addressing_mode(self.force_path_style, self.provider)


@dataclass(frozen=True)
class ObjectLocator:
    """A single stored object."""
    bucket: str
    key: str

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ValueError("Bucket cannot be empty")
        if not self.key:
            raise ValueError("Key cannot be empty")

    @property
    def copy_source(self) -> str:
        """Source string in the form CopyObject expects."""
        return f"{self.bucket}/{self.key}"


@dataclass
class ObjectDescriptor:
    """One entry of a bucket listing, plus its public URL."""
    key: str
    size: int
    last_modified: Optional[datetime]
    etag: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase keys callers expect."""
        return {
            "key": self.key,
            "size": self.size,
            "lastModified": self.last_modified,
            "etag": self.etag,
            "url": self.url,
        }


@dataclass
class UploadedFile:
    """
    A file the calling context has already spooled to disk.

    `put_object` looks these up by identifier when it is not told to
    read from a plain filesystem path.
    """
    temp_file_path: str
    filename: str = ""
    content_type: Optional[str] = None
    size_bytes: int = 0
