from pydantic import BaseModel
from typing import List


class ReportingRate(BaseModel):
    reported: int
    total: int
    percentage: int


class AggregationResult(BaseModel):
    summary: str
    aggregated_content: str
    key_highlights: List[str]
    reporting_rate: ReportingRate


class AggregationRequest(BaseModel):
    manager_id: str
    date: str
    use_ai: bool = False


class ManagementLevelFormatRequest(BaseModel):
    content: str
    from_role: str
    to_role: str
