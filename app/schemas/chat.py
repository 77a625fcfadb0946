from pydantic import BaseModel
from typing import List, Optional


class ChatRequest(BaseModel):
    query: Optional[str] = None
    user_role: Optional[str] = None
    user_id: Optional[str] = None
    context_date: Optional[str] = None  # YYYY-MM-DD, defaults to today
    max_sources: int = 5


class ReportSource(BaseModel):
    user_id: str
    user_name: str
    user_role: str
    date: str
    content_snippet: str
    relevance_score: float


class ChatResponse(BaseModel):
    success: bool
    response: Optional[str] = None
    sources: Optional[List[ReportSource]] = None
    error: Optional[str] = None
    processing_time: Optional[int] = None  # ms
    token_count: Optional[int] = None
