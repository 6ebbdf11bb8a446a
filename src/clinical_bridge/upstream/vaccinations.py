# ============================================================================
# src/clinical_bridge/upstream/vaccinations.py
# ============================================================================
"""
Effectuated vaccinations
"""

from typing import Optional

from .base import UpstreamModel

class VaccinationRecord(UpstreamModel):
    vaccination_identifier: Optional[int] = None
    vaccine: Optional[str] = None
    effectuated_date_time: Optional[str] = None
    effectuated_by: Optional[str] = None
    negative_consent: Optional[bool] = None
    active_status: Optional[bool] = None
