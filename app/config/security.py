# app/config/security.py
# Upload limits and CORS configuration

import os
from typing import Dict, List, Optional, Tuple


class SecurityConfig:
    """Security configuration for the application"""

    # Audio upload settings (Whisper accepts up to 25MB)
    AUDIO_UPLOAD = {
        'max_file_size': int(os.getenv('MAX_AUDIO_FILE_SIZE', 25 * 1024 * 1024)),  # 25MB
        'field_names': ('audio', 'file', 'recording'),
        'default_filename': 'recording.webm',
        'default_mime_type': 'audio/webm',
        'allowed_extensions': {
            '.webm', '.mp4', '.m4a', '.wav', '.mp3', '.mpeg', '.mpga', '.ogg', '.flac'
        },
    }

    # Browser recorders report several container types; normalised to what the
    # transcription endpoint expects, checked in order
    AUDIO_FORMATS: List[Tuple[str, str, str]] = [
        # (mime fragment, extension, canonical mime type)
        ('mp4', '.mp4', 'audio/mp4'),
        ('webm', '.webm', 'audio/webm'),
        ('wav', '.wav', 'audio/wav'),
        ('mpeg', '.mp3', 'audio/mpeg'),
    ]

    # CORS: the demo frontend is served from arbitrary preview hosts
    CORS = {
        'allow_origins': [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()],
        'allow_methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        'allow_headers': ['*'],
    }

    @classmethod
    def is_extension_allowed(cls, extension: str) -> bool:
        """Check if audio file extension is allowed"""
        return extension.lower() in cls.AUDIO_UPLOAD['allowed_extensions']

    @classmethod
    def normalize_audio_format(cls, mime_type: Optional[str], filename: Optional[str]) -> Dict[str, str]:
        """Pick a canonical MIME type and filename for an uploaded recording"""
        mime_type = mime_type or cls.AUDIO_UPLOAD['default_mime_type']
        filename = filename or cls.AUDIO_UPLOAD['default_filename']

        for fragment, extension, canonical in cls.AUDIO_FORMATS:
            if fragment in mime_type or filename.endswith(extension):
                if not filename.endswith(extension):
                    filename = f"recording{extension}"
                return {'mime_type': canonical, 'filename': filename}

        return {'mime_type': mime_type, 'filename': filename}
