# ============================================================================
# src/clinical_bridge/fhir_utils/condition.py
# ============================================================================
"""
FHIR Condition builder for the two diagnosis feeds.

- forloebsoversigt (patient courses): identity from the course key
- diagnoser (diagnosis list): identity from code + start date, optional
  diagnosis type as category

Clinical status is resolved exactly when the end date is present and
non-blank, otherwise active. Verification status is always confirmed.
"""

from typing import List, Optional

from fhir.resources.R4B.codeableconcept import CodeableConcept
from fhir.resources.R4B.condition import Condition
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import (
    CONDITION_CLINICAL_SYSTEM,
    CONDITION_VERIFICATION_SYSTEM,
    DIAGNOSER_IDENTIFIER_SYSTEM,
    DIAGNOSIS_CODE_SYSTEM,
    DIAGNOSIS_TYPE_SYSTEM,
    FORLOEB_IDENTIFIER_SYSTEM,
)
from ..upstream import DiagnoseEntry, DiagnoserResponse, ForloebEntry, ForloebsoversigtResponse
from ..utils.text import blank_to_none, first_present, join_present
from .common import concept, cpr_reference, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id
from .merge import merge


def map_condition_from_forloeb(entry: ForloebEntry, subject: Reference) -> Optional[Condition]:
    """
    Map one patient-course entry.

    Returns None when the entry has neither a diagnosis code nor a name.
    """
    code = blank_to_none(entry.diagnose_kode)
    display = first_present(entry.diagnose_navn, entry.diagnose_kode)
    if code is None and display is None:
        return None

    noegle = blank_to_none(entry.id_noegle.noegle) if entry.id_noegle else None
    ident = identifier(FORLOEB_IDENTIFIER_SYSTEM, noegle)

    return Condition(
        id=derive_id("cond-forloeb", noegle),
        identifier=[ident] if ident else None,
        clinicalStatus=clinical_status(entry.dato_til),
        verificationStatus=concept(CONDITION_VERIFICATION_SYSTEM, "confirmed"),
        code=_diagnosis_concept(code, entry.diagnose_navn, display),
        subject=subject,
        onsetDateTime=normalize_or_none(entry.dato_fra, Boundary.START, "onset"),
        abatementDateTime=normalize_or_none(entry.dato_til, Boundary.END, "abatement"),
        recordedDate=normalize_or_none(entry.dato_opdateret, Boundary.START, "recordedDate"),
    )


def map_condition_from_diagnose(entry: DiagnoseEntry, subject: Reference) -> Optional[Condition]:
    """
    Map one diagnosis-list entry.

    The diagnosis type tag, when given, becomes the only category.
    """
    code = blank_to_none(entry.diagnose_kode)
    display = first_present(entry.diagnose_navn, entry.diagnose_kode)
    if code is None and display is None:
        return None

    natural_key = join_present([code, entry.dato_fra], "-") or None
    ident = identifier(DIAGNOSER_IDENTIFIER_SYSTEM, code)
    diagnosis_type = blank_to_none(entry.type)

    return Condition(
        id=derive_id("cond-diag", natural_key),
        identifier=[ident] if ident else None,
        clinicalStatus=clinical_status(entry.dato_til),
        verificationStatus=concept(CONDITION_VERIFICATION_SYSTEM, "confirmed"),
        category=[concept(DIAGNOSIS_TYPE_SYSTEM, diagnosis_type)] if diagnosis_type else None,
        code=_diagnosis_concept(code, entry.diagnose_navn, display),
        subject=subject,
        onsetDateTime=normalize_or_none(entry.dato_fra, Boundary.START, "onset"),
        abatementDateTime=normalize_or_none(entry.dato_til, Boundary.END, "abatement"),
    )


def clinical_status(end_date: Optional[str]) -> CodeableConcept:
    status = "resolved" if blank_to_none(end_date) else "active"
    return concept(CONDITION_CLINICAL_SYSTEM, status)


def map_forloeb_conditions(
    payload: Optional[ForloebsoversigtResponse],
    subject: Optional[Reference] = None
) -> List[Condition]:
    if payload is None:
        return []
    subject = subject or cpr_reference(payload.person_nummer)
    return map_each(payload.forloeb, map_condition_from_forloeb, "forloeb", subject=subject)


def map_diagnose_conditions(
    payload: Optional[DiagnoserResponse],
    subject: Optional[Reference] = None
) -> List[Condition]:
    if payload is None:
        return []
    subject = subject or cpr_reference(None)
    return map_each(payload.diagnoser, map_condition_from_diagnose, "diagnose", subject=subject)


def map_conditions(
    forloeb: Optional[ForloebsoversigtResponse],
    diagnoser: Optional[DiagnoserResponse],
    subject: Optional[Reference] = None
) -> List[Condition]:
    """
    Map both diagnosis feeds into one Condition list.

    Args:
        forloeb: Patient-course payload, may be absent
        diagnoser: Diagnosis-list payload, may be absent
        subject: Subject reference; defaults to the CPR number carried
                 by the patient-course payload

    Returns:
        Course conditions followed by diagnosis-list conditions
    """
    if subject is None:
        cpr = forloeb.person_nummer if forloeb else None
        subject = cpr_reference(cpr)

    return merge(
        map_forloeb_conditions(forloeb, subject),
        map_diagnose_conditions(diagnoser, subject),
    )


def _diagnosis_concept(code: Optional[str], name: Optional[str], text: str) -> CodeableConcept:
    return concept(DIAGNOSIS_CODE_SYSTEM, code, display=name, text=text)
