# ============================================================================
# src/clinical_bridge/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .code_systems import *  # noqa: F401,F403
from .ips import (
    SummarySection,
    SectionInfo,
    SECTION_INFO,
    AbsenceCode,
    ABSENCE_CODES,
    UNAVAILABLE_SECTIONS,
    OPTIONAL_SECTIONS,
    PATIENT_SUMMARY_DOC_CODE,
    PATIENT_SUMMARY_DOC_DISPLAY,
    RESOURCE_PROFILES,
    profile_for,
)
