# app/services/transcription_service.py
"""
Voice report transcription through OpenAI Whisper
"""

from pathlib import Path
from typing import Dict, Optional, Tuple
import logging
import random
import time

from app.config.security import SecurityConfig
from app.config.settings import settings

logger = logging.getLogger(__name__)

DEMO_TRANSCRIPTIONS = [
    "Today I completed work on the user authentication system and made good progress on the API endpoints. The team collaboration has been excellent and we're on track for this week's sprint goals.",
    "I focused on bug fixes in the frontend components and improved the user interface responsiveness. Also coordinated with the design team on the new feature specifications.",
    "Made significant progress on the database optimization project. Performance improvements are showing great results in our testing environment. Planning to deploy to staging tomorrow.",
    "Worked on client requirements gathering and documentation updates. The new project roadmap is taking shape and stakeholders are aligned on priorities.",
    "Completed code reviews and helped onboard the new team member. Knowledge transfer sessions went well and development velocity is increasing.",
]


class AudioValidationError(Exception):
    """Uploaded audio cannot be transcribed; carries the HTTP status to report"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def check_audio_size(size: Optional[int]) -> None:
    """Reject recordings over the Whisper upload limit; unknown sizes pass"""
    max_size = SecurityConfig.AUDIO_UPLOAD['max_file_size']
    if size is not None and size > max_size:
        raise AudioValidationError(
            f"Audio file exceeds maximum allowed size of {max_size / (1024 * 1024):.0f}MB",
            status_code=413,
        )


def prepare_audio(data: bytes, filename: Optional[str], content_type: Optional[str]) -> Dict[str, object]:
    """Validate an uploaded recording and normalise its name and MIME type"""
    if not data:
        raise AudioValidationError('Audio file is empty. Please record some audio before submitting.')

    check_audio_size(len(data))

    extension = Path(filename or '').suffix
    if extension and not SecurityConfig.is_extension_allowed(extension):
        raise AudioValidationError(f"Audio type '{extension}' is not supported")

    normalized = SecurityConfig.normalize_audio_format(content_type, filename)
    return {"data": data, **normalized}


class TranscriptionService:
    """Sends recordings to Whisper and returns plain text"""

    def __init__(self, client):
        self.client = client
        self.model = settings.OPENAI['transcribe_model']
        self.language = settings.OPENAI['transcribe_language']

    async def transcribe(self, audio: Dict[str, object]) -> Tuple[str, int]:
        """Returns (transcription, duration_ms)"""
        logger.info(f"Calling Whisper model={self.model} file={audio['filename']} "
                    f"type={audio['mime_type']} size={len(audio['data'])} bytes")

        start = time.perf_counter()
        transcription = await self.client.audio.transcriptions.create(
            file=(audio['filename'], audio['data'], audio['mime_type']),
            model=self.model,
            language=self.language,
            response_format='text',
            temperature=0.0,
        )
        duration_ms = int((time.perf_counter() - start) * 1000)

        # response_format='text' yields a str; older SDKs wrap it in an object
        text = transcription if isinstance(transcription, str) else getattr(transcription, 'text', '')
        text = (text or '').strip()

        logger.info(f"Whisper transcription finished in {duration_ms}ms ({len(text)} chars)")
        return text, duration_ms


def demo_transcription() -> str:
    return f"[DEMO MODE] {random.choice(DEMO_TRANSCRIPTIONS)}"
