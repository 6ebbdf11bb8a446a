# ============================================================================
# src/clinical_bridge/config/summary_config.py
# ============================================================================
"""
Patient Summary Settings
- Upstream fan-out timeout
- Lab lookback window
- Document metadata
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class SummarySettings(BaseSettings):
    SUMMARY_FETCH_TIMEOUT: float = Field(
        default=20.0,
        gt=0,
        description="Seconds each upstream fetch may take before its category degrades to no data"
    )
    SUMMARY_LAB_LOOKBACK_MONTHS: int = Field(
        default=12,
        ge=1,
        description="Months of lab results included in the Results section"
    )
    SUMMARY_TITLE: str = Field(
        default="International Patient Summary",
        description="Composition title"
    )
    SUMMARY_AUTHOR_DISPLAY: str = Field(
        default="sundhed.dk via clinical-bridge",
        description="Display text of the Composition author reference"
    )
    SUMMARY_IDENTIFIER_SYSTEM: str = Field(
        default="https://www.sundhed.dk/fhir/ips",
        description="System of the document bundle identifier"
    )

summary_settings = SummarySettings()
