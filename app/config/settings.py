# app/config/settings.py
# Runtime configuration loaded from the environment (and .env when present)

import os
from dotenv import load_dotenv

load_dotenv()

PLACEHOLDER_API_KEYS = {"", "your_openai_api_key_here"}


class Settings:
    """Application settings read from environment variables"""

    # OpenAI provider
    OPENAI = {
        'api_key': os.getenv('OPENAI_API_KEY', ''),
        'chat_model': os.getenv('OPENAI_CHAT_MODEL', 'gpt-4o'),
        'transcribe_model': os.getenv('OPENAI_TRANSCRIBE_MODEL', 'whisper-1'),
        'transcribe_language': os.getenv('OPENAI_TRANSCRIBE_LANGUAGE', 'en'),
        'timeout_seconds': float(os.getenv('OPENAI_TIMEOUT_SECONDS', 30)),
    }

    # Persistence for the report store
    DATABASE = {
        'url': os.getenv('DATABASE_URL', 'sqlite:///./lastnext24.db'),
    }

    # In-memory response cache
    CACHE = {
        'default_ttl_seconds': int(os.getenv('CACHE_TTL_SECONDS', 5 * 60)),
        'chat_ttl_seconds': int(os.getenv('CHAT_CACHE_TTL_SECONDS', 5 * 60)),
        'cleanup_minutes': int(os.getenv('CACHE_CLEANUP_MINUTES', 5)),
        'max_entries_before_cleanup': int(os.getenv('CACHE_MAX_ENTRIES', 100)),
    }

    # Server
    SERVER = {
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', '8000')),
        'reload': os.getenv('RELOAD', 'true').lower() == 'true',
        'log_level': os.getenv('LOG_LEVEL', 'info').lower(),
    }

    @classmethod
    def openai_api_key(cls) -> str:
        """Re-read the key so tests and late .env loads are honoured"""
        return os.getenv('OPENAI_API_KEY', cls.OPENAI['api_key'])

    @classmethod
    def is_openai_configured(cls) -> bool:
        return cls.openai_api_key() not in PLACEHOLDER_API_KEYS


settings = Settings()
