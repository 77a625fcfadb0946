# app/services/openai_client.py
"""
Thin wrapper around the OpenAI SDK: client construction and error wrapping
"""

import logging

import openai
from openai import AsyncOpenAI

from app.config.settings import settings

logger = logging.getLogger(__name__)


class OpenAIServiceError(Exception):
    """Error raised by an OpenAI-backed operation"""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class OpenAIConfigError(OpenAIServiceError):
    """The provider cannot be used because it is not configured"""


class ChatError(OpenAIServiceError):
    pass


class SummarizationError(OpenAIServiceError):
    pass


class TranscriptionError(OpenAIServiceError):
    pass


OPERATION_ERRORS = {
    "chat": ChatError,
    "summarization": SummarizationError,
    "transcription": TranscriptionError,
}


def create_openai_client() -> AsyncOpenAI:
    """Build an async client; raises OpenAIConfigError when no key is set"""
    if not settings.is_openai_configured():
        raise OpenAIConfigError("OPENAI_API_KEY environment variable is required")

    # No retries: callers fall back or surface the failure immediately
    return AsyncOpenAI(
        api_key=settings.openai_api_key(),
        timeout=settings.OPENAI['timeout_seconds'],
        max_retries=0,
    )


def handle_openai_error(error: Exception, operation: str) -> OpenAIServiceError:
    """Wrap any error with operation context, typed by operation"""
    error_class = OPERATION_ERRORS.get(operation, OpenAIServiceError)

    if isinstance(error, OpenAIServiceError):
        return error

    if isinstance(error, openai.APIError):
        logger.error(f"OpenAI API error during {operation}: {error}")
        return error_class(f"OpenAI API error during {operation}: {error.message}", error)

    logger.error(f"Error during {operation}: {error}")
    return error_class(f"Error during {operation}: {error}", error)


def estimate_token_count(text: str) -> int:
    """Rough estimation: 1 token is about 4 characters"""
    return -(-len(text or "") // 4)


def first_choice_text(completion, default: str) -> str:
    """Pull the first message content out of a chat completion"""
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return default
    return content.strip() if content and content.strip() else default
