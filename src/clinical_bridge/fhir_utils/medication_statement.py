# ============================================================================
# src/clinical_bridge/fhir_utils/medication_statement.py
# ============================================================================
"""
FHIR MedicationStatement builder for medication card ordinations.
"""

from typing import Dict, List, Optional

from fhir.resources.R4B.dosage import Dosage
from fhir.resources.R4B.medicationstatement import MedicationStatement
from fhir.resources.R4B.period import Period
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import ACTIVE_SUBSTANCE_SYSTEM, ORDINATION_SYSTEM
from ..upstream import MedicationCardEntry
from ..utils.text import blank_to_none, first_present
from .common import concept, cpr_reference, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id

STATUS_MAP: Dict[str, str] = {
    "active": "active",
    "completed": "completed",
    "stopped": "stopped",
    "ended": "stopped",
    "entered-in-error": "entered-in-error",
}


def map_medication_status(raw: Optional[str]) -> str:
    """Upstream ordination status -> MedicationStatement.status ('unknown' by default)."""
    if raw is None:
        return "unknown"
    return STATUS_MAP.get(raw.strip().lower(), "unknown")


def map_medication_statement(
    entry: MedicationCardEntry,
    subject: Reference
) -> Optional[MedicationStatement]:
    """
    Create FHIR MedicationStatement for one ordination.

    Args:
        entry: Medication card entry
        subject: Subject reference

    Returns:
        MedicationStatement, or None when neither drug name nor active
        substance is given
    """
    substance = blank_to_none(entry.active_substance)
    text = first_present(entry.drug_medication, substance)
    if text is None:
        return None

    ordination_id = blank_to_none(entry.ordination_id)
    ident = identifier(ORDINATION_SYSTEM, ordination_id)

    dosage = None
    dosage_text = blank_to_none(entry.dosage)
    if dosage_text:
        dosage = [Dosage(text=dosage_text, patientInstruction=blank_to_none(entry.cause))]

    return MedicationStatement(
        id=derive_id("medstmt", ordination_id),
        identifier=[ident] if ident else None,
        status=map_medication_status(entry.status.enum_str if entry.status else None),
        medicationCodeableConcept=concept(
            ACTIVE_SUBSTANCE_SYSTEM, substance, display=substance, text=text
        ),
        subject=subject,
        effectivePeriod=_effective_period(entry),
        dosage=dosage,
    )


def _effective_period(entry: MedicationCardEntry) -> Optional[Period]:
    start = normalize_or_none(entry.start_date, Boundary.START, "startDate")
    end = normalize_or_none(
        first_present(entry.end_date, entry.dosage_end_date), Boundary.END, "endDate"
    )
    if start is None and end is None:
        return None
    return Period(start=start, end=end)


def map_medication_statements(
    entries: Optional[List[MedicationCardEntry]],
    subject: Optional[Reference] = None
) -> List[MedicationStatement]:
    return map_each(
        entries, map_medication_statement, "medication",
        subject=subject or cpr_reference(None),
    )
