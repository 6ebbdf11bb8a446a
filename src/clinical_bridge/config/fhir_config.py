# ============================================================================
# src/clinical_bridge/config/fhir_config.py
# ============================================================================
"""
FHIR Output Settings
- Resource id bounds
- Profiles
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class FHIRSettings(BaseSettings):
    FHIR_ID_MAX_LENGTH: int = Field(
        default=64,
        ge=16, le=64,
        description="Maximum length of a synthetic resource id (FHIR id datatype caps at 64)"
    )
    FHIR_INCLUDE_PROFILES: bool = Field(
        default=True,
        description="Attach IPS meta.profile URLs to resources in the patient summary"
    )

fhir_settings = FHIRSettings()
