from pydantic import BaseModel
from typing import Any, List, Literal, Optional


class SummarizeRequest(BaseModel):
    # Loosely typed so blank/non-string entries are filtered rather than rejected
    reports: Optional[List[Any]] = None
    context: Optional[str] = None
    summary_type: Literal["individual", "aggregate", "executive"] = "aggregate"
    max_length: int = 500


class SummarizeResponse(BaseModel):
    success: bool
    summary: Optional[str] = None
    individual_summaries: Optional[List[str]] = None
    error: Optional[str] = None
    processing_time: Optional[int] = None  # ms
    token_count: Optional[int] = None
