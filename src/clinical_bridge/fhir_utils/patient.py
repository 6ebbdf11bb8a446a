# ============================================================================
# src/clinical_bridge/fhir_utils/patient.py
# ============================================================================
"""
FHIR Patient builder for person selection data.
"""

from typing import List, Optional

from fhir.resources.R4B.humanname import HumanName
from fhir.resources.R4B.patient import Patient

from ..constants.code_systems import CPR_SYSTEM
from ..upstream import PersonDelegationData, PersonSelectionResponse
from ..utils.text import blank_to_none
from .common import identifier, map_each, normalize_cpr
from .identity import derive_id


def build_name(full_name: Optional[str]) -> Optional[HumanName]:
    """Last token is the family name, the preceding tokens are given names."""
    full_name = blank_to_none(full_name)
    if full_name is None:
        return None
    parts = full_name.split()
    return HumanName(
        text=full_name,
        family=parts[-1],
        given=parts[:-1] or None,
    )


def map_patient(
    person: Optional[PersonDelegationData] = None,
    cpr: Optional[str] = None
) -> Patient:
    """
    Create FHIR Patient from a person selection entry and/or CPR number.

    Args:
        person: Person selection entry, may be absent
        cpr: CPR number; defaults to the one on the entry

    Returns:
        Patient with id pat-<cpr> (random when no CPR is known)
    """
    cpr = normalize_cpr(cpr or (person.cpr if person else None))
    ident = identifier(CPR_SYSTEM, cpr)
    name = build_name(person.name if person else None)

    return Patient(
        id=derive_id("pat", cpr),
        identifier=[ident] if ident else None,
        name=[name] if name else None,
    )


def map_patients(
    payload: Optional[PersonSelectionResponse],
    name: Optional[str] = None,
    identifier_value: Optional[str] = None
) -> List[Patient]:
    """
    Map the person selection list, optionally filtered.

    Args:
        payload: Person selection response
        name: Case-insensitive substring match on the full name
        identifier_value: CPR number, bare or as "system|value"
    """
    if payload is None:
        return []

    wanted_cpr = None
    if blank_to_none(identifier_value):
        wanted_cpr = normalize_cpr(identifier_value.split("|")[-1])
    wanted_name = blank_to_none(name)

    def _matches(person: PersonDelegationData) -> bool:
        if wanted_cpr and normalize_cpr(person.cpr) != wanted_cpr:
            return False
        if wanted_name and wanted_name.lower() not in (person.name or "").lower():
            return False
        return True

    selected = [p for p in payload.person_delegation_data if _matches(p)]
    return map_each(selected, map_patient, "person")
