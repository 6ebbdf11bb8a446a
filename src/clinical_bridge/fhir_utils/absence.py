# ============================================================================
# src/clinical_bridge/fhir_utils/absence.py
# ============================================================================
"""
Absence policy for summary sections.

An empty category that has a sentinel concept is replaced by exactly one
"no known ..." resource so the section never reads as silently empty.
Missing data and failed fetches arrive here as empty lists.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence
import logging

from fhir.resources.R4B.condition import Condition
from fhir.resources.R4B.immunization import Immunization
from fhir.resources.R4B.medicationstatement import MedicationStatement
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import ABSENT_UNKNOWN_SYSTEM, CONDITION_CLINICAL_SYSTEM
from ..constants.ips import ABSENCE_CODES, AbsenceCode, SummarySection
from .common import concept
from .identity import derive_id
from .immunization import UNKNOWN_OCCURRENCE

logger = logging.getLogger(__name__)


def no_known_problems(subject: Reference, absence: AbsenceCode) -> Condition:
    return Condition(
        id=derive_id("cond-no-known"),
        clinicalStatus=concept(CONDITION_CLINICAL_SYSTEM, "active"),
        code=concept(ABSENT_UNKNOWN_SYSTEM, absence.code, display=absence.display),
        subject=subject,
    )


def no_known_medications(subject: Reference, absence: AbsenceCode) -> MedicationStatement:
    return MedicationStatement(
        id=derive_id("medstmt-no-known"),
        status="unknown",
        medicationCodeableConcept=concept(
            ABSENT_UNKNOWN_SYSTEM, absence.code, display=absence.display
        ),
        subject=subject,
    )


def no_immunization_info(subject: Reference, absence: AbsenceCode) -> Immunization:
    return Immunization(
        id=derive_id("imm-no-known"),
        status="not-done",
        vaccineCode=concept(ABSENT_UNKNOWN_SYSTEM, absence.code, display=absence.display),
        patient=subject,
        occurrenceString=UNKNOWN_OCCURRENCE,
    )


SENTINEL_FACTORIES: Dict[SummarySection, Callable[[Reference, AbsenceCode], Any]] = {
    SummarySection.PROBLEMS: no_known_problems,
    SummarySection.MEDICATIONS: no_known_medications,
    SummarySection.IMMUNIZATIONS: no_immunization_info,
}


def apply_absence_policy(
    merged: Optional[Sequence[Any]],
    section: SummarySection,
    subject: Reference
) -> List[Any]:
    """
    Guarantee a non-empty resource list for sections with a sentinel.

    Args:
        merged: Mapped (and merged) resources of the category, may be None
        section: Summary section the resources belong to
        subject: Subject reference for the sentinel

    Returns:
        The input unchanged when non-empty or when the section has no
        sentinel concept, else a list holding one sentinel resource
    """
    resources = list(merged or [])
    if resources:
        return resources

    section = SummarySection(section)
    absence = ABSENCE_CODES.get(section)
    if absence is None:
        return resources

    logger.info(
        f"No {section.value} data, adding '{absence.code}' entry",
        extra={"category": section.value}
    )
    return [SENTINEL_FACTORIES[section](subject, absence)]


def is_sentinel(resource: Any) -> bool:
    """True for a resource produced by the absence policy."""
    for attribute in ("code", "medicationCodeableConcept", "vaccineCode"):
        value = getattr(resource, attribute, None)
        if value is not None and value.coding:
            if any(c.system == ABSENT_UNKNOWN_SYSTEM for c in value.coding):
                return True
    return False
