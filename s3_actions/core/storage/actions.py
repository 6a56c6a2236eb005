"""
Storage actions.

Six independent coroutines, each taking an option bag:
- signed_upload / signed_download: presigned PUT / GET URLs
- put_object: upload a local or previously spooled file
- list_files: list a bucket (or prefix) with public URLs
- copy_object / delete_file: server-side copy and delete

Every action validates its own fields, then the connection fields, and
only then builds a client. Nothing is shared between calls.
"""

import asyncio
import logging
import mimetypes
import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional

from .config import resolve_storage_config
from .errors import FileAccessError, UnknownActionError
from .models import ObjectDescriptor, ObjectLocator, StorageConfig, UploadedFile
from .options import ActionOptions, parse_options, required
from .urls import object_url
from ...infrastructure.storage.client import ObjectStore, create_object_store

logger = logging.getLogger(__name__)

Options = Optional[Mapping[str, Any]]
UploadedFiles = Optional[Mapping[str, UploadedFile]]

DEFAULT_EXPIRES_SECONDS = 300
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# mimetypes reports compression separately from the inner type
COMPRESSED_CONTENT_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


def guess_content_type(key: str) -> str:
    """
    MIME type from the key's last extension, octet-stream when unknown.

    A compressed key such as `backup.tar.gz` is labelled by its
    compression, not by the archive inside it.
    """
    content_type, encoding = mimetypes.guess_type(key, strict=False)
    if encoding:
        return COMPRESSED_CONTENT_TYPES.get(encoding, DEFAULT_CONTENT_TYPE)
    return content_type or DEFAULT_CONTENT_TYPE


# ---------------------------------------------------------------------------
# Option Models
# ---------------------------------------------------------------------------

class ObjectOptions(ActionOptions):
    bucket: str = required("Bucket is required.")
    key: str = required("Key is required.")


class SignedUploadOptions(ObjectOptions):
    content_type: Optional[str] = None
    expires: float = DEFAULT_EXPIRES_SECONDS
    acl: Optional[str] = None


class SignedDownloadOptions(ObjectOptions):
    expires: float = DEFAULT_EXPIRES_SECONDS


class PutObjectOptions(ActionOptions):
    file: str = required("File is required.")
    bucket: str = required("Bucket is required.")
    key: str = required("Key is required.")
    content_type: Optional[str] = None
    acl: Optional[str] = None
    content_disposition: Optional[str] = None
    use_file_path: bool = False


class ListFilesOptions(ActionOptions):
    bucket: str = required("Bucket is required.")
    prefix: str = ""


class CopyObjectOptions(ActionOptions):
    src_bucket: str = required("Source Bucket is required.")
    src_key: str = required("Source Key is required.")
    dst_bucket: str = required("Destination Bucket is required.")
    dst_key: str = required("Destination Key is required.")


class DeleteFileOptions(ObjectOptions):
    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _connect(options: Options) -> tuple[StorageConfig, ObjectStore]:
    """Resolve the connection fields and build a fresh client."""
    config = resolve_storage_config(options)
    return config, create_object_store(config)


def resolve_file_path(
    identifier: str,
    use_file_path: bool,
    uploaded_files: UploadedFiles = None,
) -> str:
    """
    Locate the local file behind a put_object `file` identifier.

    With use_file_path the identifier is a path relative to the working
    directory; otherwise it names an entry in `uploaded_files`. A leading
    separator does not make the identifier absolute: `/etc/hosts` means
    `<cwd>/etc/hosts`.
    """
    if use_file_path:
        # concatenate, os.path.join would discard cwd for an absolute identifier
        path = os.path.normpath(os.getcwd() + os.sep + identifier)
    else:
        uploaded = (uploaded_files or {}).get(identifier)
        if uploaded is None:
            raise FileAccessError(
                f"No uploaded file named '{identifier}'", identifier=identifier
            )
        path = uploaded.temp_file_path

    if not os.path.isfile(path):
        raise FileAccessError(f"File not found: {path}", identifier=identifier)

    return path


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

async def signed_upload(options: Options, uploaded_files: UploadedFiles = None) -> str:
    """Presigned URL for uploading one object with PUT."""
    opts = parse_options(SignedUploadOptions, options)
    content_type = opts.content_type or guess_content_type(opts.key)

    _, store = _connect(options)

    url = await store.presign_put(
        bucket=opts.bucket,
        key=opts.key,
        content_type=content_type,
        expires_in=int(opts.expires),
        acl=opts.acl,
    )

    logger.info(
        "Signed upload URL",
        extra={"bucket": opts.bucket, "key": opts.key, "expires": opts.expires},
    )

    return url


async def signed_download(options: Options, uploaded_files: UploadedFiles = None) -> str:
    """Presigned URL for downloading one object with GET."""
    opts = parse_options(SignedDownloadOptions, options)

    _, store = _connect(options)

    url = await store.presign_get(
        bucket=opts.bucket,
        key=opts.key,
        expires_in=int(opts.expires),
    )

    logger.info(
        "Signed download URL",
        extra={"bucket": opts.bucket, "key": opts.key, "expires": opts.expires},
    )

    return url


async def put_object(options: Options, uploaded_files: UploadedFiles = None) -> dict[str, Any]:
    """
    Upload a file and return the backend response with its public URL.

    The file is either a path relative to the working directory
    (useFilePath) or the name of a file the caller already spooled to
    disk. The body is streamed from disk, not read into memory.
    """
    opts = parse_options(PutObjectOptions, options)
    content_type = opts.content_type or guess_content_type(opts.key)

    config, store = _connect(options)

    path = resolve_file_path(opts.file, opts.use_file_path, uploaded_files)

    body = await asyncio.to_thread(open, path, "rb")
    try:
        result = await store.put_object(
            bucket=opts.bucket,
            key=opts.key,
            body=body,
            content_type=content_type,
            acl=opts.acl,
            content_disposition=opts.content_disposition,
        )
    finally:
        body.close()

    return {
        **result,
        "url": object_url(config, opts.bucket, opts.key),
        "bucket": opts.bucket,
        "key": opts.key,
    }


async def list_files(options: Options, uploaded_files: UploadedFiles = None) -> list[dict[str, Any]]:
    """List objects under a prefix. Empty buckets give an empty list."""
    opts = parse_options(ListFilesOptions, options)

    config, store = _connect(options)

    result = await store.list_objects(bucket=opts.bucket, prefix=opts.prefix)
    contents = result.get("Contents") or []

    logger.debug(
        "Listed objects",
        extra={"bucket": opts.bucket, "prefix": opts.prefix, "count": len(contents)},
    )

    return [
        ObjectDescriptor(
            key=item["Key"],
            size=item.get("Size", 0),
            last_modified=item.get("LastModified"),
            etag=item.get("ETag", ""),
            url=object_url(config, opts.bucket, item["Key"]),
        ).to_dict()
        for item in contents
    ]


async def copy_object(options: Options, uploaded_files: UploadedFiles = None) -> dict[str, Any]:
    """Server-side copy; overwrites the destination if it exists."""
    opts = parse_options(CopyObjectOptions, options)
    source = ObjectLocator(bucket=opts.src_bucket, key=opts.src_key)

    _, store = _connect(options)

    return await store.copy_object(
        copy_source=source.copy_source,
        bucket=opts.dst_bucket,
        key=opts.dst_key,
    )


async def delete_file(options: Options, uploaded_files: UploadedFiles = None) -> dict[str, Any]:
    """Delete one object without checking that it exists first."""
    opts = parse_options(DeleteFileOptions, options)

    _, store = _connect(options)

    await store.delete_object(bucket=opts.bucket, key=opts.key)

    return {"success": True, "bucket": opts.bucket, "key": opts.key}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Action = Callable[[Options, UploadedFiles], Awaitable[Any]]

ACTIONS: dict[str, Action] = {
    "signed_upload": signed_upload,
    "signed_download": signed_download,
    "put_object": put_object,
    "list_files": list_files,
    "copy_object": copy_object,
    "delete_file": delete_file,
}


async def run_action(
    name: str,
    options: Options,
    uploaded_files: UploadedFiles = None,
) -> Any:
    """Run a registered action by name."""
    action = ACTIONS.get(name)
    if action is None:
        raise UnknownActionError(f"Unknown action: {name}")

    logger.debug("Running action", extra={"action": name})

    return await action(options, uploaded_files)
