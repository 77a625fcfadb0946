# app/routers/transcribe.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile
from typing import Callable, Optional
import logging

from app.config.security import SecurityConfig
from app.config.settings import settings
from app.schemas.transcribe import TranscriptionResponse
from app.services.openai_client import handle_openai_error
from app.services.transcription_service import (
    AudioValidationError,
    TranscriptionService,
    check_audio_size,
    demo_transcription,
    prepare_audio,
)
from app.utils.session import get_openai_client_factory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transcribe", tags=["Transcribe"])


def find_audio_file(form) -> Optional[UploadFile]:
    """Look in the known field names first, then take the first uploaded file"""
    for field in SecurityConfig.AUDIO_UPLOAD['field_names']:
        value = form.get(field)
        if isinstance(value, UploadFile):
            return value

    for _, value in form.multi_items():
        if isinstance(value, UploadFile):
            return value
    return None


@router.post("", response_model=TranscriptionResponse, response_model_exclude_none=True)
async def transcribe(
    request: Request,
    client_factory: Callable = Depends(get_openai_client_factory)
):
    """Transcribe an uploaded voice report with Whisper"""
    if not settings.is_openai_configured():
        logger.warning("Transcription requested but OpenAI API key is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Transcription service unavailable: OpenAI API key not configured. "
                   "Please set OPENAI_API_KEY environment variable."
        )

    content_type = request.headers.get("content-type")
    if not content_type or "multipart/form-data" not in content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Content-Type must be multipart/form-data, received: {content_type or 'none'}"
        )

    try:
        form = await request.form()
    except Exception as e:
        logger.error(f"Failed to parse multipart form: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid audio data format"
        )

    upload = find_audio_file(form)
    if upload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No audio file provided"
        )

    try:
        check_audio_size(upload.size)
        data = await upload.read()
        audio = prepare_audio(data, upload.filename, upload.content_type)
    except AudioValidationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    finally:
        await upload.close()

    try:
        service = TranscriptionService(client_factory())
        transcription, duration = await service.transcribe(audio)
    except Exception as e:
        handled = handle_openai_error(e, "transcription")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=handled.message
        )

    return TranscriptionResponse(success=True, transcription=transcription, duration=duration)


@router.post("/demo", response_model=TranscriptionResponse, response_model_exclude_none=True)
async def transcribe_demo():
    """Canned transcription for trying the recorder without an API key"""
    return TranscriptionResponse(
        success=True,
        transcription=demo_transcription(),
        duration=1500,
        demo=True,
    )
