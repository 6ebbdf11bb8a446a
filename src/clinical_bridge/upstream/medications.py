# ============================================================================
# src/clinical_bridge/upstream/medications.py
# ============================================================================
"""
Medication card (medicinkort) ordinations
"""

from typing import Optional

from .base import UpstreamModel

class MedicationCardStatus(UpstreamModel):
    enum_str: Optional[str] = None
    text: Optional[str] = None


class MedicationCardEntry(UpstreamModel):
    ordination_id: Optional[str] = None
    status: Optional[MedicationCardStatus] = None
    drug_medication: Optional[str] = None
    active_substance: Optional[str] = None
    dosage: Optional[str] = None
    cause: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    dosage_end_date: Optional[str] = None
