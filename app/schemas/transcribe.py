from pydantic import BaseModel
from typing import Optional


class TranscriptionResponse(BaseModel):
    success: bool
    transcription: Optional[str] = None
    error: Optional[str] = None
    duration: Optional[int] = None  # ms
    demo: Optional[bool] = None
