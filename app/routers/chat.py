# app/routers/chat.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Callable
import logging
import time

import openai

from app.config.settings import settings
from app.schemas.chat import ChatRequest, ChatResponse
from app.services.cache import CacheService, response_cache
from app.services.chat_service import ChatService, get_current_date
from app.services.openai_client import OpenAIServiceError, estimate_token_count, handle_openai_error
from app.utils.hierarchy import HierarchyManager
from app.utils.session import get_hierarchy, get_openai_client_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    request: ChatRequest,
    hierarchy: HierarchyManager = Depends(get_hierarchy),
    client_factory: Callable = Depends(get_openai_client_factory)
):
    """Answer a question about the reports visible to the caller's role"""
    if not request.query or not request.query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query is required and must not be empty"
        )

    if not request.user_role:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User role is required"
        )

    query = request.query.strip()
    context_date = request.context_date or get_current_date()

    cache_key = CacheService.create_key(
        "chat", query, request.user_role, request.user_id, context_date, request.max_sources
    )
    cached = response_cache.get(cache_key)
    if cached is not None:
        logger.info(f"Chat cache hit for {request.user_role} on {context_date}")
        return cached

    start = time.perf_counter()
    try:
        service = ChatService(client_factory(), hierarchy)
        result = await service.answer(
            query,
            request.user_role,
            user_id=request.user_id,
            context_date=context_date,
            max_sources=request.max_sources,
        )
    except (OpenAIServiceError, openai.OpenAIError) as e:
        handled = handle_openai_error(e, "chat")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=handled.message
        )
    except Exception as e:
        logger.exception(f"Chat error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during chat processing"
        )

    response = ChatResponse(
        success=True,
        response=result["response"],
        sources=result["sources"],
        processing_time=int((time.perf_counter() - start) * 1000),
        token_count=estimate_token_count(result["response"]),
    )
    response_cache.set(cache_key, response, ttl=settings.CACHE['chat_ttl_seconds'])
    return response
