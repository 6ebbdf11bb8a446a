# ============================================================================
# src/clinical_bridge/constants/ips.py
# ============================================================================
"""
International Patient Summary (IPS) constants
- Summary sections (closed set) and their LOINC codes
- Absent/unknown sentinel codes
- IPS profile URLs
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional

class SummarySection(str, Enum):
    """
    Clinical categories of the patient summary.
    Each category becomes one Composition section.
    """
    PROBLEMS = "problems"
    MEDICATIONS = "medications"
    ALLERGIES = "allergies"
    IMMUNIZATIONS = "immunizations"
    RESULTS = "results"


class SectionInfo(NamedTuple):
    title: str
    code: str
    display: str


# Dict order is the Composition section order
SECTION_INFO: Dict[SummarySection, SectionInfo] = {
    SummarySection.PROBLEMS: SectionInfo(
        "Problem List", "11450-4", "Problem list - Reported"
    ),
    SummarySection.MEDICATIONS: SectionInfo(
        "Medication Summary", "10160-0", "History of Medication use Narrative"
    ),
    SummarySection.ALLERGIES: SectionInfo(
        "Allergies and Intolerances", "48765-2", "Allergies and adverse reactions Document"
    ),
    SummarySection.IMMUNIZATIONS: SectionInfo(
        "Immunizations", "11369-6", "History of Immunization Narrative"
    ),
    SummarySection.RESULTS: SectionInfo(
        "Results", "30954-2", "Relevant diagnostic tests/laboratory data Narrative"
    ),
}

PATIENT_SUMMARY_DOC_CODE = "60591-5"
PATIENT_SUMMARY_DOC_DISPLAY = "Patient summary Document"


class AbsenceCode(NamedTuple):
    code: str
    display: str


# Categories without an entry here have no sentinel concept
ABSENCE_CODES: Dict[SummarySection, AbsenceCode] = {
    SummarySection.PROBLEMS: AbsenceCode("no-known-problems", "No known problems"),
    SummarySection.MEDICATIONS: AbsenceCode("no-known-medications", "No known medications"),
    SummarySection.IMMUNIZATIONS: AbsenceCode(
        "no-immunization-info", "No information about immunizations"
    ),
}

# Sections backed by no upstream feed
UNAVAILABLE_SECTIONS = frozenset({SummarySection.ALLERGIES})

# Sections left out of the document when empty
OPTIONAL_SECTIONS = frozenset({SummarySection.RESULTS})

PROFILE_COMPOSITION = "http://hl7.org/fhir/uv/ips/StructureDefinition/Composition-uv-ips"
PROFILE_PATIENT = "http://hl7.org/fhir/uv/ips/StructureDefinition/Patient-uv-ips"
PROFILE_CONDITION = "http://hl7.org/fhir/uv/ips/StructureDefinition/Condition-uv-ips"
PROFILE_MEDICATION_STATEMENT = "http://hl7.org/fhir/uv/ips/StructureDefinition/MedicationStatement-uv-ips"
PROFILE_IMMUNIZATION = "http://hl7.org/fhir/uv/ips/StructureDefinition/Immunization-uv-ips"
PROFILE_OBSERVATION_LAB = "http://hl7.org/fhir/uv/ips/StructureDefinition/Observation-results-laboratory-uv-ips"

RESOURCE_PROFILES: Dict[str, str] = {
    "Composition": PROFILE_COMPOSITION,
    "Patient": PROFILE_PATIENT,
    "Condition": PROFILE_CONDITION,
    "MedicationStatement": PROFILE_MEDICATION_STATEMENT,
    "Immunization": PROFILE_IMMUNIZATION,
    "Observation": PROFILE_OBSERVATION_LAB,
}


def profile_for(resource_type: str) -> Optional[str]:
    """IPS profile URL for a resource type, if any."""
    return RESOURCE_PROFILES.get(resource_type)
