"""API controller for chat operations.

``POST /api/chat`` accepts either a JSON body (``{"message": "..."}``)
or a multipart form with a ``message`` field and any number of file
parts. The browser client names its parts ``attachment_<i>`` and may
send the declared kind of each in ``attachment_<i>_type``.
"""

from __future__ import annotations

import json
from pathlib import PurePath
from typing import Any

from fastapi import APIRouter, Depends, Request
from loguru import logger
from starlette.datastructures import FormData, UploadFile

from ..config.app_config import AppConfig, get_app_config
from ..models.attachment import AttachmentRef
from ..models.chat_request import ChatRequest
from ..models.chat_response import ChatResponse
from ..models.enums import AttachmentType
from ..services.chat_mediator import ChatMediator, get_chat_mediator
from ..utils.error_handler import ChatValidationError

router = APIRouter(prefix="/api", tags=["Chat"])

ALLOWED_EXTENSIONS = frozenset(
    {
        ".jpeg", ".jpg", ".png", ".gif", ".webp",
        ".mp3", ".wav", ".ogg", ".mp4", ".webm",
        ".pdf", ".doc", ".docx", ".txt",
    }
)
ALLOWED_MIME_TYPES = frozenset(
    {
        "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp",
        "audio/mpeg", "audio/mp3", "audio/wav", "audio/x-wav", "audio/wave",
        "audio/ogg", "audio/webm", "audio/mp4", "video/mp4", "video/webm", "video/ogg",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    }
)
INVALID_FILE_TYPE_MESSAGE = (
    "Invalid file type. Only images, audio, video, and documents are allowed."
)


async def _read_json_message(request: Request) -> str:
    raw = await request.body()
    if not raw.strip():
        return ""
    try:
        body: Any = json.loads(raw)
    except ValueError as exc:
        raise ChatValidationError("Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise ChatValidationError("Request body must be a JSON object")
    message = body.get("message") or ""
    if not isinstance(message, str):
        raise ChatValidationError("message must be a string")
    return message


async def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    data = await upload.read()
    await upload.seek(0)
    return len(data)


def _check_file_type(upload: UploadFile) -> None:
    extension = PurePath(upload.filename or "").suffix.lower()
    mime_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if extension not in ALLOWED_EXTENSIONS or mime_type not in ALLOWED_MIME_TYPES:
        raise ChatValidationError(INVALID_FILE_TYPE_MESSAGE)


async def _read_form(request: Request, app_config: AppConfig) -> tuple[str, list[AttachmentRef]]:
    async with request.form() as form:
        return await _collect_form(form, app_config)


async def _collect_form(form: FormData, app_config: AppConfig) -> tuple[str, list[AttachmentRef]]:
    message = form.get("message") or ""
    if not isinstance(message, str):
        raise ChatValidationError("message must be a text field")

    attachments: list[AttachmentRef] = []
    for key, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        _check_file_type(value)
        size = await _upload_size(value)
        if size > app_config.max_upload_bytes:
            raise ChatValidationError(
                f"File '{value.filename}' exceeds the {app_config.max_upload_bytes} byte limit"
            )
        declared = form.get(f"{key}_type")
        attachments.append(
            AttachmentRef(
                name=value.filename or key,
                declared_type=AttachmentType.from_declared(
                    declared if isinstance(declared, str) else None,
                    value.content_type,
                ),
                size_bytes=size,
            )
        )
    return message, attachments


async def parse_chat_request(
    request: Request,
    app_config: AppConfig = Depends(get_app_config),
) -> ChatRequest:
    """Build a validated :class:`ChatRequest` from a JSON or multipart body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        message, attachments = await _read_form(request, app_config)
    else:
        message, attachments = await _read_json_message(request), []
    return ChatRequest(text=message, attachments=attachments)


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat_endpoint(
    chat_request: ChatRequest = Depends(parse_chat_request),
    mediator: ChatMediator = Depends(get_chat_mediator),
) -> ChatResponse:
    """Accept a chat message and return the assistant's reply.

    Upstream outages and rate limits never surface here: the reply then
    comes from the fallback responder and carries a ``note``. A rejected
    API key (401) and invalid requests (400) are returned as
    ``{"error": ...}``.
    """
    logger.info(
        "Received chat request ({} chars, {} attachment(s))",
        len(chat_request.text),
        len(chat_request.attachments),
    )
    response = await mediator.handle(chat_request)
    if response.note:
        logger.info("Answered with fallback: {}", response.note)
    else:
        logger.info("Answer generated successfully")
    return response
