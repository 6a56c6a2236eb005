"""
Storage action endpoints.

Each action is exposed as POST /api/v1/actions/{action_name} taking the
option bag as a JSON object. put_object also has a multipart variant
that spools the uploaded parts to temp files first, mirroring how a
form post hands files to the action:

    POST /api/v1/actions/put_object/upload
    file=@report.pdf bucket=docs key=2024/report.pdf accessKeyId=...

Errors raised by the actions are mapped to status codes by the handlers
registered in main.py.
"""

import logging
import os
import tempfile
from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException, Request, status
from pydantic import BaseModel, Field
from starlette.datastructures import UploadFile

from ...core.storage import actions
from ...core.storage.models import UploadedFile
from ..dependencies import AuthenticatedUser, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()

_CHUNK_SIZE = 1024 * 1024


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ActionResponse(BaseModel):
    """Result of one action call."""
    action: str = Field(description="Name of the action that ran")
    result: Any = Field(description="Action result: a URL, a listing or a backend response")


class ActionListResponse(BaseModel):
    actions: list[str]


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------

async def spool_upload(
    upload: UploadFile,
    max_size_bytes: int,
    temp_dir: str | None = None,
) -> UploadedFile:
    """
    Copy an uploaded part to a temp file and describe it.

    The temp file is removed again if the upload exceeds the size cap.
    """
    suffix = os.path.splitext(upload.filename or "")[1]
    size = 0

    with tempfile.NamedTemporaryFile(suffix=suffix, dir=temp_dir, delete=False) as tmp:
        tmp_path = tmp.name
        try:
            while chunk := await upload.read(_CHUNK_SIZE):
                size += len(chunk)
                if size > max_size_bytes:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=f"Upload too large. Maximum size: {max_size_bytes // (1024 * 1024)}MB",
                    )
                tmp.write(chunk)
        except Exception:
            tmp.close()
            os.unlink(tmp_path)
            raise

    return UploadedFile(
        temp_file_path=tmp_path,
        filename=upload.filename or "",
        content_type=upload.content_type,
        size_bytes=size,
    )


def remove_spooled(uploaded_files: dict[str, UploadedFile]) -> None:
    for uploaded in uploaded_files.values():
        try:
            os.unlink(uploaded.temp_file_path)
        except FileNotFoundError:
            pass


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=ActionListResponse,
    summary="List available actions",
)
async def list_actions(api_key: AuthenticatedUser) -> ActionListResponse:
    return ActionListResponse(actions=sorted(actions.ACTIONS))


@router.post(
    "/put_object/upload",
    response_model=ActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a file and store it",
    description="Multipart variant of put_object. Form fields form the option bag.",
)
async def put_object_upload(
    request: Request,
    api_key: AuthenticatedUser,
    settings: SettingsDep,
) -> ActionResponse:
    """
    Spool uploaded parts to disk and run put_object against them.

    The `file` option names the form field holding the upload, so a
    form can carry several files and pick one.
    """
    form = await request.form()

    options: dict[str, Any] = {}
    uploaded_files: dict[str, UploadedFile] = {}

    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                uploaded_files[name] = await spool_upload(
                    value,
                    max_size_bytes=settings.max_upload_size_bytes,
                    temp_dir=settings.upload_temp_dir,
                )
            else:
                options[name] = value

        # multipart uploads never read from the server filesystem
        options["useFilePath"] = False

        logger.info(
            "Multipart put_object",
            extra={
                "bucket": options.get("bucket"),
                "key": options.get("key"),
                "files": list(uploaded_files),
            }
        )

        result = await actions.put_object(options, uploaded_files)
    finally:
        remove_spooled(uploaded_files)
        await form.close()

    return ActionResponse(action="put_object", result=result)


@router.post(
    "/{action_name}",
    response_model=ActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Run a storage action",
    description="The JSON body is the action's option bag, credentials included.",
)
async def run_action(
    action_name: str,
    api_key: AuthenticatedUser,
    settings: SettingsDep,
    options: Annotated[dict[str, Any], Body()] = None,
) -> ActionResponse:
    """
    Run one action with a JSON option bag.

    put_object through this endpoint only works with useFilePath, since
    a JSON body carries no files, and only when local file uploads are
    enabled in settings.
    """
    logger.info("Action requested", extra={"action": action_name})

    if action_name == "put_object" and not settings.allow_local_file_uploads:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Local file uploads are disabled. Use /api/v1/actions/put_object/upload.",
        )

    result = await actions.run_action(action_name, options or {})

    return ActionResponse(action=action_name, result=result)
