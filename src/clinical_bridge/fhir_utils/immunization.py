# ============================================================================
# src/clinical_bridge/fhir_utils/immunization.py
# ============================================================================
"""
FHIR Immunization builder for effectuated vaccinations.
"""

from typing import List, Optional

from fhir.resources.R4B.immunization import Immunization, ImmunizationPerformer
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import VACCINATION_ID_SYSTEM
from ..upstream import VaccinationRecord
from ..utils.text import blank_to_none
from .common import concept, cpr_reference, display_reference, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id

UNKNOWN_OCCURRENCE = "unknown"


def map_immunization_status(record: VaccinationRecord) -> str:
    """
    Negative consent and inactive records are not-done; everything
    else, including an unset active flag, is completed.
    """
    if record.negative_consent is True:
        return "not-done"
    if record.active_status is False:
        return "not-done"
    return "completed"


def map_immunization(record: VaccinationRecord, subject: Reference) -> Optional[Immunization]:
    vaccine = blank_to_none(record.vaccine)
    if vaccine is None:
        return None

    natural_key = str(record.vaccination_identifier) if record.vaccination_identifier is not None else None
    ident = identifier(VACCINATION_ID_SYSTEM, record.vaccination_identifier)

    occurred = normalize_or_none(record.effectuated_date_time, Boundary.START, "effectuatedDateTime")
    performer = display_reference(record.effectuated_by)

    return Immunization(
        id=derive_id("imm", natural_key),
        identifier=[ident] if ident else None,
        status=map_immunization_status(record),
        vaccineCode=concept(text=vaccine),
        patient=subject,
        occurrenceDateTime=occurred,
        occurrenceString=None if occurred else UNKNOWN_OCCURRENCE,
        recorded=occurred,
        performer=[ImmunizationPerformer(actor=performer)] if performer else None,
    )


def map_immunizations(
    records: Optional[List[VaccinationRecord]],
    subject: Optional[Reference] = None
) -> List[Immunization]:
    return map_each(
        records, map_immunization, "vaccination",
        subject=subject or cpr_reference(None),
    )
