# ============================================================================
# FILE: tests/unit/test_summary_service.py
# ============================================================================
"""
Unit tests for the patient summary service (concurrent fan-out)
"""

from datetime import date
import logging

import pytest

from clinical_bridge.fhir_utils.absence import is_sentinel
from clinical_bridge.services.summary_service import (
    PatientSummaryService,
    cpr_from_patient_id,
    lab_window,
    months_before,
)
from clinical_bridge.upstream import PersonSelectionResponse

SELF_URL = "https://bridge.example/fhir/Patient/pat-1111111111/$summary"
TODAY = date(2024, 3, 15)


def section_entries(bundle, loinc):
    composition = bundle.entry[0].resource
    for section in composition.section:
        if section.code.coding[0].code == loinc:
            return section.entry or []
    return None


# ============================================================================
# HELPERS
# ============================================================================

def test_months_before_clamps_to_month_end():
    assert months_before(date(2024, 3, 15), 12) == date(2023, 3, 15)
    assert months_before(date(2024, 3, 31), 1) == date(2024, 2, 29)
    assert months_before(date(2024, 1, 10), 1) == date(2023, 12, 10)


def test_lab_window():
    assert lab_window(TODAY, 12) == ("2023-03-15T00:00:00", "2024-03-15T23:59:59")


def test_cpr_from_patient_id():
    assert cpr_from_patient_id("pat-1111111111") == "1111111111"
    assert cpr_from_patient_id("111111-1111") == "1111111111"
    assert cpr_from_patient_id(None) is None


# ============================================================================
# FAN-OUT
# ============================================================================

@pytest.mark.asyncio
async def test_fetches_all_categories(fake_client, cpr):
    """Test every category is fetched and the patient is selected by CPR"""
    service = PatientSummaryService(fake_client)
    data = await service.fetch_summary_data(f"pat-{cpr}", today=TODAY)

    called = {call[0] for call in fake_client.calls}
    assert called == {
        "fetch_person_selection", "fetch_diagnoser", "fetch_forloebsoversigt",
        "fetch_medication_card", "fetch_effectuated_vaccinations", "fetch_labsvar",
    }
    assert data.cpr == cpr
    assert data.patient.name == "Test Mellem Person"
    assert data.missing == []


@pytest.mark.asyncio
async def test_lab_fetch_uses_lookback_window(fake_client):
    service = PatientSummaryService(fake_client, lab_lookback_months=6)
    await service.fetch_summary_data("pat-1111111111", today=TODAY)

    lab_call = next(call for call in fake_client.calls if call[0] == "fetch_labsvar")
    assert lab_call[1:] == ("2023-09-15T00:00:00", "2024-03-15T23:59:59")


@pytest.mark.asyncio
async def test_failed_fetch_degrades_to_sentinel(make_client):
    """Test a failing category becomes a sentinel instead of an error"""
    client = make_client(failures={"fetch_medication_card": RuntimeError("upstream 502")})
    service = PatientSummaryService(client)

    bundle = await service.summary("pat-1111111111", SELF_URL, today=TODAY)

    entries = section_entries(bundle, "10160-0")
    assert len(entries) == 1
    by_url = {e.fullUrl: e.resource for e in bundle.entry}
    assert is_sentinel(by_url[entries[0].reference])
    # Other categories are unaffected
    assert len(section_entries(bundle, "11450-4")) == 3


@pytest.mark.asyncio
async def test_slow_fetch_times_out(make_client):
    client = make_client(delays={"fetch_effectuated_vaccinations": 1.0})
    service = PatientSummaryService(client, fetch_timeout=0.05)

    data = await service.fetch_summary_data("pat-1111111111", today=TODAY)

    assert data.missing == ["immunizations"]
    assert data.immunizations is None
    assert data.medications is not None


@pytest.mark.asyncio
async def test_unknown_person_still_builds_summary(make_client):
    client = make_client(fetch_person_selection=None)
    service = PatientSummaryService(client)

    bundle = await service.summary("pat-1111111111", SELF_URL, today=TODAY)
    patient = bundle.entry[1].resource

    assert patient.id == "pat-1111111111"
    assert patient.name is None


@pytest.mark.asyncio
async def test_everything_failing_gives_sentinel_only_document(make_client):
    failures = {
        name: RuntimeError("down")
        for name in (
            "fetch_person_selection", "fetch_diagnoser", "fetch_forloebsoversigt",
            "fetch_medication_card", "fetch_effectuated_vaccinations", "fetch_labsvar",
        )
    }
    service = PatientSummaryService(make_client(failures=failures))

    data = await service.fetch_summary_data("pat-1111111111", today=TODAY)
    assert len(data.missing) == 6

    bundle = service.builder.build(data, SELF_URL)
    assert section_entries(bundle, "30954-2") is None
    assert all(is_sentinel(e.resource) for e in bundle.entry[2:])


@pytest.mark.asyncio
async def test_dashed_cpr_in_person_selection_still_names_patient(make_client):
    """Test person lookup ignores dashes in the listed CPR number"""
    selection = PersonSelectionResponse.model_validate({
        "personDelegationData": [{"cpr": "111111-1111", "name": "Test Person"}]
    })
    service = PatientSummaryService(make_client(fetch_person_selection=selection))

    data = await service.fetch_summary_data("pat-1111111111", today=TODAY)
    assert data.patient is not None

    bundle = service.builder.build(data, SELF_URL)
    patient = bundle.entry[1].resource
    assert patient.id == "pat-1111111111"
    assert patient.name[0].text == "Test Person"


@pytest.mark.asyncio
async def test_degraded_category_is_tagged_on_log_records(make_client, caplog):
    client = make_client(failures={"fetch_medication_card": RuntimeError("upstream 502")})
    service = PatientSummaryService(client)

    with caplog.at_level(logging.INFO, logger="clinical_bridge"):
        await service.summary("pat-1111111111", SELF_URL, today=TODAY)

    tagged = [r for r in caplog.records if getattr(r, "category", None) == "medications"]
    assert {r.name for r in tagged} == {
        "clinical_bridge.services.summary_service",
        "clinical_bridge.fhir_utils.summary",
        "clinical_bridge.fhir_utils.absence",
    }
