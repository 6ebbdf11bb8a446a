# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.

Upstream payloads are built from camelCase JSON, the way they arrive.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from clinical_bridge.services.client import UpstreamClient
from clinical_bridge.upstream import (
    AppointmentsResponse,
    CoreOrganizationResponse,
    DiagnoserResponse,
    ForloebsoversigtResponse,
    LabsvarResponse,
    MedicationCardEntry,
    PersonSelectionResponse,
    VaccinationRecord,
)

CPR = "1111111111"


@pytest.fixture
def cpr():
    return CPR


@pytest.fixture
def crp_findings() -> Dict[str, Any]:
    """Quantitative findings table: header row, then one data row"""
    return {
        "data": [
            [None, "Code", "CodeType", "CodeResponsible", "Text",
             "InterPretation_Code", "InterPretation_CodeType",
             "InterPretation_CodeResponseble", "InterPretation_Text",
             "Value", "Unit", "Ref. Område", "Kommentar", None],
            ["Finding: 0", "DNK35312", "0", "SSI", "CRP",
             None, "0", None, "_", "5.2", "mg/L", "", "", None],
        ],
        "noColumns": 2,
        "noRows": 14,
    }


@pytest.fixture
def crp_result(crp_findings) -> Dict[str, Any]:
    return {
        "analysetypeId": "KliniskBiokemi",
        "produktionsnummerLaboratorie": "prod-1",
        "proevenummerLaboratorie": "prov-1",
        "proevenummerRekvirent": "prov-1",
        "rekvisitionsId": "req-1",
        "resultatStatus": "KompletSvar",
        "resultatStatuskode": "SvarEndeligt",
        "resultatdato": "2024-02-01T08:32:00+01:00",
        "resultattype": "Xrpt05",
        "referenceIntervalTekst": "< 8 mg/L",
        "undersoegelser": [{
            "analyseKode": "DNK35312",
            "eksaminator": "Statens Serum Institut",
            "materiale": "Serum",
            "oprindelsesSted": "Lab",
            "producent": "SSI",
            "quantitativeFindings": crp_findings,
            "undersoegelsesNavn": "CRP",
        }],
        "vaerditype": "Tal",
    }


@pytest.fixture
def crp_requisition() -> Dict[str, Any]:
    return {
        "afsenderHtml": "Clinic",
        "id": "req-1",
        "laboratorieProductionsNummer": "prod-1",
        "laboratorieProevenummer": "prov-1",
        "laboratorieomraade": "KliniskBiokemi",
        "patientCpr": CPR,
        "patientNavn": "Test Person",
        "proevetagningstidspunkt": "2024-02-01T07:00:00+01:00",
        "rekvirentHtml": "Clinic",
        "rekvirentsOrganisation": "Clinic",
        "rekvirentsProevenummer": "prov-1",
        "svartidspunkt": "2024-02-01T08:40:00+01:00",
    }


@pytest.fixture
def labsvar_payload(crp_result, crp_requisition) -> LabsvarResponse:
    return LabsvarResponse.model_validate({
        "svaroversigt": {
            "laboratorieresultater": [crp_result],
            "rekvisitioner": [crp_requisition],
        }
    })


@pytest.fixture
def pathology_payload() -> LabsvarResponse:
    return LabsvarResponse.model_validate({
        "svaroversigt": {
            "laboratorieresultater": [{
                "analysetypeId": "Patologi",
                "rekvisitionsId": "AH91-4634_910400XXX",
                "resultatStatus": "KompletSvar",
                "resultatStatuskode": "SvarEndeligt",
                "resultatdato": "1981-06-12T00:00:00.0000000+02:00",
                "vaerditype": "Tekst",
                "materialeHtml": "[1]: APPENDIX <br/>",
                "diagnoseHtml": "[1]: Sdslke flksdfjk - asdf <br/>",
                "konklusionHtml": "[01]T6XXXX csdlkj <br/>M41700sf mlksdf&#230;n&#248;s sdfnjlk<br/>",
                "mikroskopiHtml": " lkfsdms eef ...",
                "makroskopiHtml": " lksfdk ml fslkm ...",
                "kliniskeInformationerHtml": " ÆLSDF KÆFLSD: FSDÆLK. DSFSDFÆKL.",
                "vaerdi": "PATO",
                "undersoegelser": [],
            }],
            "rekvisitioner": [{
                "id": "AH91-4634_9104004634",
                "patientCpr": "0701833281",
                "patientNavn": "John Petersen",
                "rekvirentsOrganisation": "Patologisk Institut",
                "proevetagningstidspunkt": "1984-05-07T15:00:00.0000000+02:00",
            }],
        }
    })


@pytest.fixture
def forloeb_payload() -> ForloebsoversigtResponse:
    return ForloebsoversigtResponse.model_validate({
        "personNummer": "111111-1111",
        "forloeb": [
            {
                "diagnoseKode": "DE119",
                "diagnoseNavn": "Type 2-diabetes uden komplikationer",
                "datoFra": "2019-03-04T00:00:00+01:00",
                "datoTil": "",
                "datoOpdateret": "2023-11-20T10:15:00+01:00",
                "sygehusNavn": "Rigshospitalet",
                "afdelingsNavn": "Endokrinologisk afdeling",
                "idNoegle": {"noegle": "FORLOEB-123/ABC"},
            },
            {
                "diagnoseKode": "DS821",
                "diagnoseNavn": "Brud på skinneben",
                "datoFra": "2021-06-01T00:00:00+02:00",
                "datoTil": "2021-09-15T00:00:00+02:00",
                "idNoegle": {"noegle": "FORLOEB-456"},
            },
        ],
    })


@pytest.fixture
def diagnoser_payload() -> DiagnoserResponse:
    return DiagnoserResponse.model_validate({
        "diagnoser": [
            {
                "diagnoseKode": "DJ459",
                "diagnoseNavn": "Astma UNS",
                "type": "Aktionsdiagnose",
                "datoFra": "2015-05-12T00:00:00+02:00",
            },
            {
                "diagnoseNavn": "",
                "diagnoseKode": None,
                "type": "Bidiagnose",
            },
        ]
    })


@pytest.fixture
def medication_entries() -> List[MedicationCardEntry]:
    return [
        MedicationCardEntry.model_validate({
            "ordinationId": "ORD-1001",
            "status": {"enumStr": "Active", "text": "Aktiv"},
            "drugMedication": "Metformin \"Sandoz\" 500 mg",
            "activeSubstance": "Metformin",
            "dosage": "1 tablet 2 gange daglig",
            "cause": "Mod sukkersyge",
            "startDate": "2019-03-10T00:00:00+01:00",
            "dosageEndDate": "2025-03-10T00:00:00+01:00",
        }),
        MedicationCardEntry.model_validate({
            "ordinationId": "ORD-1002",
            "status": {"enumStr": "Ended"},
            "activeSubstance": "Amoxicillin",
            "startDate": "2022-01-03",
            "endDate": "2022-01-10",
        }),
    ]


@pytest.fixture
def vaccination_records() -> List[VaccinationRecord]:
    return [
        VaccinationRecord.model_validate({
            "vaccinationIdentifier": 98765,
            "vaccine": "Comirnaty",
            "effectuatedDateTime": "2021-05-01T09:30:00+02:00",
            "effectuatedBy": "Vaccinationscenter Nord",
            "activeStatus": True,
        }),
        VaccinationRecord.model_validate({
            "vaccinationIdentifier": 98766,
            "vaccine": "Influenza",
            "negativeConsent": True,
        }),
    ]


@pytest.fixture
def appointments_payload() -> AppointmentsResponse:
    return AppointmentsResponse.model_validate({
        "appointments": [
            {
                "appointmentType": "consult",
                "title": "Consultation",
                "documentId": "doc-1",
                "startTime": "2024-01-15T10:00:00+01:00",
                "endTime": "2024-01-15T10:30:00+01:00",
                "patient": {
                    "familyName": "Belias",
                    "givenName": "Elias",
                    "personIdentifier": "1207130201",
                },
                "performer": {"organisation": "Dr. Doe"},
                "location": {
                    "organisation": "Clinic A",
                    "address": {"formatted": "Hovedgaden 1, 2000 Frederiksberg"},
                },
            },
            {
                "appointmentType": "control",
                "title": "Kontrol",
                "documentId": "doc-2",
                "startTime": "2024-02-05T08:00:00+01:00",
                "endTimeNotDefined": True,
                "location": {"organisation": "Clinic B"},
            },
        ]
    })


@pytest.fixture
def organizations_payload() -> CoreOrganizationResponse:
    return CoreOrganizationResponse.model_validate({
        "organizations": [{
            "organizationId": 4711,
            "cvrNumber": 12345678,
            "name": "Lægehuset Nord",
            "displayName": "Lægehuset Nord ApS",
            "category": "Almen praksis",
            "street": "Nørregade",
            "houseNumberFrom": "12",
            "floor": "2",
            "door": "",
            "city": "Aarhus C",
            "zipCode": 8000,
            "municipality": "Aarhus",
            "homepage": "https://laegehusetnord.dk",
            "lastUpdated": "2024-03-01T12:00:00Z",
        }]
    })


@pytest.fixture
def person_selection() -> PersonSelectionResponse:
    return PersonSelectionResponse.model_validate({
        "personDelegationData": [
            {"id": "p1", "cpr": CPR, "name": "Test Mellem Person", "relationType": "Self"},
            {"id": "p2", "cpr": "2222222222", "name": "Barn Person", "relationType": "Child"},
        ]
    })


class FakeUpstreamClient(UpstreamClient):
    """
    Upstream client returning fixture payloads.

    `failures` maps a fetch method name to an exception to raise;
    `delays` maps a fetch method name to seconds to sleep first.
    """

    def __init__(self, payloads: Dict[str, Any], failures=None, delays=None):
        super().__init__()
        self.payloads = payloads
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[tuple] = []

    async def _serve(self, name: str, *args) -> Any:
        self.calls.append((name,) + args)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]
        return self.payloads.get(name)

    async def fetch_person_selection(self):
        return await self._serve("fetch_person_selection")

    async def fetch_diagnoser(self):
        return await self._serve("fetch_diagnoser")

    async def fetch_forloebsoversigt(self):
        return await self._serve("fetch_forloebsoversigt")

    async def fetch_medication_card(self):
        return await self._serve("fetch_medication_card") or []

    async def fetch_effectuated_vaccinations(self):
        return await self._serve("fetch_effectuated_vaccinations") or []

    async def fetch_labsvar(self, fra: Optional[str] = None, til: Optional[str] = None):
        return await self._serve("fetch_labsvar", fra, til)

    async def fetch_appointments(self, start: Optional[str] = None, end: Optional[str] = None):
        return await self._serve("fetch_appointments", start, end)

    async def fetch_organizations(self):
        return await self._serve("fetch_organizations")


@pytest.fixture
def upstream_payloads(
    person_selection,
    diagnoser_payload,
    forloeb_payload,
    medication_entries,
    vaccination_records,
    labsvar_payload,
    appointments_payload,
    organizations_payload,
) -> Dict[str, Any]:
    return {
        "fetch_person_selection": person_selection,
        "fetch_diagnoser": diagnoser_payload,
        "fetch_forloebsoversigt": forloeb_payload,
        "fetch_medication_card": medication_entries,
        "fetch_effectuated_vaccinations": vaccination_records,
        "fetch_labsvar": labsvar_payload,
        "fetch_appointments": appointments_payload,
        "fetch_organizations": organizations_payload,
    }


@pytest.fixture
def fake_client(upstream_payloads) -> FakeUpstreamClient:
    return FakeUpstreamClient(upstream_payloads)


@pytest.fixture
def make_client(upstream_payloads):
    """Factory for clients with overridden payloads, failures or delays"""
    def _make(failures=None, delays=None, **overrides) -> FakeUpstreamClient:
        payloads = dict(upstream_payloads)
        payloads.update(overrides)
        return FakeUpstreamClient(payloads, failures=failures, delays=delays)
    return _make
