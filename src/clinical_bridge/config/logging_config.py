# ============================================================================
# src/clinical_bridge/config/logging_config.py
# ============================================================================
"""
Logging Settings
- Log level
- Output format
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

class LoggingSettings(BaseSettings):
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FORMAT_JSON: bool = Field(
        default=False,
        description="Emit JSON log lines instead of plain text"
    )
    LOG_FILE: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )

logging_settings = LoggingSettings()
