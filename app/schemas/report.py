from pydantic import BaseModel, Field, field_validator
from typing import Optional
import re

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_date(value: str) -> str:
    if not DATE_RE.match(value):
        raise ValueError("date must be formatted YYYY-MM-DD")
    return value


class Report(BaseModel):
    id: str
    user_id: str
    date: str
    content: str
    summary: Optional[str] = None
    created_at: str
    updated_at: str

    model_config = {
        "frozen": True
    }


class StoredReport(BaseModel):
    id: str
    user_id: str
    date: str
    content: str
    summary: Optional[str] = None
    title: Optional[str] = None
    audio_blob_key: Optional[str] = None
    has_audio: Optional[bool] = None
    created_at: str
    updated_at: str

    def to_report(self) -> Report:
        return Report(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            content=self.content,
            summary=self.summary,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ReportCreate(BaseModel):
    title: Optional[str] = None
    content: str = Field(..., min_length=1)
    date: str
    # Audio bytes are never stored here, only whether a recording came along
    has_audio: bool = False
    audio_duration: Optional[float] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be empty")
        return value

    @field_validator("date")
    @classmethod
    def date_format(cls, value: str) -> str:
        return _check_date(value)


class ReportUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    date: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("content must not be empty")
        return value

    @field_validator("date")
    @classmethod
    def date_format(cls, value: Optional[str]) -> Optional[str]:
        return _check_date(value) if value is not None else value


class StorageStats(BaseModel):
    total_reports: int
    current_user_reports: int
    storage_used: str
