# ============================================================================
# src/clinical_bridge/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .fhir_config import fhir_settings, FHIRSettings
from .summary_config import summary_settings, SummarySettings
from .logging_config import logging_settings, LoggingSettings
