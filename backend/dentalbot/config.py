"""
Configuration management for the dental chatbot service.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / ".env")


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


class Config:
    """Application configuration class."""

    # Image analysis service
    AI_ANALYSIS_URL = os.environ.get("AI_ANALYSIS_URL", "http://localhost:3010/analyze")
    AI_ANALYSIS_TIMEOUT = float(os.environ.get("AI_ANALYSIS_TIMEOUT", 60))

    # Session store eviction (unset = keep sessions for the process lifetime)
    SESSION_TTL_SECONDS = _optional_int("SESSION_TTL_SECONDS")
    MAX_SESSIONS = _optional_int("MAX_SESSIONS")

    # Server Configuration
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 3020))
    RELOAD = os.environ.get("RELOAD", "true").lower() == "true"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # CORS Configuration
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")

    # File Upload Configuration
    UPLOAD_DIR = Path(os.environ.get("UPLOAD_DIR", "uploads"))
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
    ALLOWED_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif"]

    @classmethod
    def validate(cls):
        """Validate required configuration."""
        if not cls.AI_ANALYSIS_URL:
            raise RuntimeError("AI_ANALYSIS_URL is required")
        if cls.AI_ANALYSIS_TIMEOUT <= 0:
            raise RuntimeError("AI_ANALYSIS_TIMEOUT must be positive")
        if cls.SESSION_TTL_SECONDS is not None and cls.SESSION_TTL_SECONDS <= 0:
            raise RuntimeError("SESSION_TTL_SECONDS must be positive when set")
        if cls.MAX_SESSIONS is not None and cls.MAX_SESSIONS <= 0:
            raise RuntimeError("MAX_SESSIONS must be positive when set")
        return True


# Create configuration instance
config = Config()
