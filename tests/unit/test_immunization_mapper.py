# ============================================================================
# FILE: tests/unit/test_immunization_mapper.py
# ============================================================================
"""
Unit tests for the Immunization mapper
"""

from datetime import datetime, timezone

from clinical_bridge.constants.code_systems import VACCINATION_ID_SYSTEM
from clinical_bridge.fhir_utils.common import cpr_reference
from clinical_bridge.fhir_utils.dates import as_utc
from clinical_bridge.fhir_utils.immunization import (
    UNKNOWN_OCCURRENCE,
    map_immunization,
    map_immunization_status,
    map_immunizations,
)
from clinical_bridge.upstream import VaccinationRecord


def test_maps_effectuated_vaccination(vaccination_records, cpr):
    """Test completed vaccination with date and performer"""
    immunization = map_immunizations(vaccination_records, cpr_reference(cpr))[0]

    assert immunization.id == "imm-98765"
    assert immunization.status == "completed"
    assert immunization.identifier[0].system == VACCINATION_ID_SYSTEM
    assert immunization.identifier[0].value == "98765"
    assert immunization.vaccineCode.text == "Comirnaty"
    assert immunization.patient.identifier.value == cpr
    assert as_utc(immunization.occurrenceDateTime) == datetime(2021, 5, 1, 7, 30, tzinfo=timezone.utc)
    assert immunization.occurrenceString is None
    assert immunization.performer[0].actor.display == "Vaccinationscenter Nord"


def test_negative_consent_is_not_done(vaccination_records):
    immunization = map_immunizations(vaccination_records)[1]

    assert immunization.status == "not-done"
    assert immunization.occurrenceDateTime is None
    assert immunization.occurrenceString == UNKNOWN_OCCURRENCE
    assert immunization.performer is None


def test_status_rules():
    """Test negative consent and active flag"""
    assert map_immunization_status(VaccinationRecord()) == "completed"
    assert map_immunization_status(VaccinationRecord(active_status=True)) == "completed"
    assert map_immunization_status(VaccinationRecord(active_status=False)) == "not-done"
    assert map_immunization_status(
        VaccinationRecord(active_status=True, negative_consent=True)
    ) == "not-done"


def test_record_without_vaccine_is_dropped():
    record = VaccinationRecord(vaccination_identifier=1, vaccine="  ")
    assert map_immunization(record, cpr_reference(None)) is None
    assert map_immunizations([record]) == []


def test_bad_date_yields_unknown_occurrence():
    record = VaccinationRecord(vaccine="MFR", effectuated_date_time="not-a-date")
    immunization = map_immunization(record, cpr_reference(None))

    assert immunization.occurrenceString == UNKNOWN_OCCURRENCE
    assert immunization.recorded is None
