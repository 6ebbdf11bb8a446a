# ============================================================================
# src/clinical_bridge/fhir_utils/observation.py
# ============================================================================
"""
FHIR Observation builder for lab answers (labsvar).

Value selection, first match wins:
1. Numeric value from the quantitative findings table (first data row)
2. Pathology narrative (conclusion, cleaned HTML)
3. Free-text result value
4. Raw text of the findings value cell

Pathology narrative fields are carried as labelled notes.
"""

from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from fhir.resources.R4B.annotation import Annotation
from fhir.resources.R4B.observation import Observation, ObservationReferenceRange
from fhir.resources.R4B.quantity import Quantity
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import (
    LAB_CODE_SYSTEM,
    LAB_REQUISITION_SYSTEM,
    OBSERVATION_CATEGORY_SYSTEM,
)
from ..upstream import (
    Laboratorieresultat,
    LabsvarResponse,
    QuantitativeFindings,
    Rekvisition,
)
from ..utils.text import blank_to_none, clean_html, first_present, join_present
from .common import concept, cpr_reference, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id

# Fixed layout of the findings table: header row, then data rows
VALUE_ROW = 1
VALUE_COLUMN = 9
UNIT_COLUMN = 10

NOT_DETECTED = "ikke påvist"

# Upstream status code (or status text) -> Observation.status
STATUS_MAP: Dict[str, str] = {
    "SvarEndeligt": "final",
    "KompletSvar": "final",
    "Foreloebigt": "preliminary",
    "Annulleret": "cancelled",
}

# (label, result attribute) in note order
PATHOLOGY_NOTES = [
    ("Materiale", "materiale_html"),
    ("Diagnose", "diagnose_html"),
    ("Konklusion", "konklusion_html"),
    ("Mikroskopi", "mikroskopi_html"),
    ("Makroskopi", "makroskopi_html"),
    ("Kliniske oplysninger", "kliniske_informationer_html"),
]


def map_observation(
    result: Laboratorieresultat,
    rekvisition: Optional[Rekvisition] = None,
    subject: Optional[Reference] = None
) -> Optional[Observation]:
    """
    Create FHIR Observation for one lab result.

    Args:
        result: Lab result record
        rekvisition: Requisition the result belongs to, if known
        subject: Subject reference; defaults to the requisition patient

    Returns:
        Observation, or None when no code or name is available
    """
    undersoegelse = result.undersoegelser[0] if result.undersoegelser else None
    analyse_kode = blank_to_none(undersoegelse.analyse_kode) if undersoegelse else None
    navn = blank_to_none(undersoegelse.undersoegelses_navn) if undersoegelse else None

    text = first_present(navn, result.analysetype_id, result.resultattype, result.vaerditype)
    if analyse_kode is None and text is None:
        return None

    if subject is None:
        subject = cpr_reference(
            rekvisition.patient_cpr if rekvisition else None,
            rekvisition.patient_navn if rekvisition else None,
        )

    rekvisitions_id = blank_to_none(result.rekvisitions_id)
    natural_key = join_present([
        first_present(rekvisitions_id, result.proevenummer_laboratorie),
        analyse_kode,
    ], "-") or None
    ident = identifier(LAB_REQUISITION_SYSTEM, rekvisitions_id)

    effective = normalize_or_none(result.resultatdato, Boundary.START, "resultatdato")
    if effective is None and rekvisition is not None:
        effective = normalize_or_none(
            rekvisition.proevetagningstidspunkt, Boundary.START, "proevetagningstidspunkt"
        )

    findings = undersoegelse.quantitative_findings if undersoegelse else None
    quantity = extract_quantity(findings)
    value_string = None
    if quantity is None:
        value_string = first_present(
            clean_html(result.konklusion_html),
            clean_html(result.diagnose_html),
            result.vaerdi,
            _value_cell(findings),
        )

    reference_text = blank_to_none(result.reference_interval_tekst)
    notes = pathology_notes(result)

    return Observation(
        id=derive_id("lab", natural_key),
        identifier=[ident] if ident else None,
        status=map_observation_status(result.resultat_statuskode, result.resultat_status),
        category=[concept(OBSERVATION_CATEGORY_SYSTEM, "laboratory", display="Laboratory")],
        code=concept(LAB_CODE_SYSTEM, analyse_kode, display=navn, text=text),
        subject=subject,
        effectiveDateTime=effective,
        issued=normalize_or_none(
            rekvisition.svartidspunkt if rekvisition else None, Boundary.START, "svartidspunkt"
        ),
        valueQuantity=quantity,
        valueString=value_string,
        referenceRange=[ObservationReferenceRange(text=reference_text)] if reference_text else None,
        note=notes or None,
    )


def map_observation_status(status_code: Optional[str], status_text: Optional[str]) -> str:
    """
    Map upstream status to FHIR Observation.status.

    The status code wins over the status text; anything unrecognized
    becomes 'unknown'.
    """
    raw = status_code if status_code is not None else status_text
    return STATUS_MAP.get((raw or "").strip(), "unknown")


def extract_quantity(findings: Optional[QuantitativeFindings]) -> Optional[Quantity]:
    """
    Numeric value and unit from the findings table.

    Returns None for a missing table or cell, the not-detected marker,
    or any cell text that is not a decimal number.
    """
    raw = _value_cell(findings)
    if raw is None or raw.lower() == NOT_DETECTED:
        return None

    try:
        value = Decimal(raw.replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None

    row = findings.data[VALUE_ROW]
    unit = None
    if len(row) > UNIT_COLUMN and row[UNIT_COLUMN] is not None:
        unit = blank_to_none(str(row[UNIT_COLUMN]))
    return Quantity(value=value, unit=unit)


def pathology_notes(result: Laboratorieresultat) -> List[Annotation]:
    notes = []
    for label, attribute in PATHOLOGY_NOTES:
        text = clean_html(getattr(result, attribute))
        if text:
            notes.append(Annotation(text=f"{label}: {text}"))
    return notes


def map_observations(
    payload: Optional[LabsvarResponse],
    subject: Optional[Reference] = None
) -> List[Observation]:
    """
    Map every lab result of a labsvar payload.

    Results are paired with their requisition by requisition id.
    """
    if payload is None or payload.svaroversigt is None:
        return []

    overview = payload.svaroversigt
    requisitions = {r.id: r for r in overview.rekvisitioner if r.id}

    def _map(result: Laboratorieresultat) -> Optional[Observation]:
        return map_observation(result, requisitions.get(result.rekvisitions_id), subject)

    return map_each(overview.laboratorieresultater, _map, "lab")


def _value_cell(findings: Optional[QuantitativeFindings]) -> Optional[str]:
    if findings is None or not findings.data or len(findings.data) <= VALUE_ROW:
        return None
    row = findings.data[VALUE_ROW]
    if len(row) <= VALUE_COLUMN or row[VALUE_COLUMN] is None:
        return None
    return blank_to_none(str(row[VALUE_COLUMN]))
