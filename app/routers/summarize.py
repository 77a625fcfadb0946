# app/routers/summarize.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Callable
import logging
import time

import openai

from app.schemas.summarize import SummarizeRequest, SummarizeResponse
from app.services.openai_client import OpenAIServiceError, estimate_token_count, handle_openai_error
from app.services.summarize_service import SummarizationService, filter_valid_reports
from app.utils.session import get_openai_client_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Summarize"])


@router.post("/summarize", response_model=SummarizeResponse, response_model_exclude_none=True)
async def summarize(
    request: SummarizeRequest,
    client_factory: Callable = Depends(get_openai_client_factory)
):
    """Summarize free-text reports: individual, aggregate or executive"""
    if not request.reports:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reports array is required and must not be empty"
        )

    valid_reports = filter_valid_reports(request.reports)
    if not valid_reports:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one valid report is required"
        )

    start = time.perf_counter()
    try:
        service = SummarizationService(client_factory())
        result = await service.summarize(
            valid_reports,
            context=request.context,
            summary_type=request.summary_type,
            max_length=request.max_length,
        )
    except (OpenAIServiceError, openai.OpenAIError) as e:
        handled = handle_openai_error(e, "summarization")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=handled.message
        )
    except Exception as e:
        logger.exception(f"Summarization error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during summarization"
        )

    return SummarizeResponse(
        success=True,
        summary=result["summary"],
        individual_summaries=result["individual_summaries"],
        processing_time=int((time.perf_counter() - start) * 1000),
        token_count=estimate_token_count(result["summary"]),
    )
