# -*- coding: utf-8 -*-


from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# API Settings
_API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
_API_TIMEOUT = int(os.getenv("API_TIMEOUT", "30"))
_API_VERIFY_SSL = os.getenv("API_VERIFY_SSL", "false").lower() in ("true", "1", "yes")
_API_TOKEN = os.getenv("API_TOKEN", None)

# Wizard Settings
_RESOLUTION_MODE = os.getenv("RESOLUTION_MODE", "thread").lower()
_SUBTYPE_FALLBACK_ENABLED = os.getenv("SUBTYPE_FALLBACK_ENABLED", "true").lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "Document Management Console"
    VERSION: str = "1.0.0"

    # HTTP API Backend Settings
    # Reads from .env file (API_BASE_URL, API_TIMEOUT, API_VERIFY_SSL, API_TOKEN)
    API_BASE_URL: str = _API_BASE_URL
    API_TIMEOUT: int = _API_TIMEOUT
    API_VERIFY_SSL: bool = _API_VERIFY_SSL
    API_TOKEN: Optional[str] = _API_TOKEN

    # Create-document wizard
    # "thread" = QThread workers, "immediate" = resolve inline
    RESOLUTION_MODE: str = _RESOLUTION_MODE
    SUBTYPE_FALLBACK_ENABLED: bool = _SUBTYPE_FALLBACK_ENABLED
    TITLE_MAX_LENGTH: int = 50
    TITLE_ELLIPSIS: str = "..."

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Logging
    LOG_FILE: str = "app.log"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3
