# ============================================================================
# src/clinical_bridge/upstream/labs.py
# ============================================================================
"""
Lab answers (labsvar)
- Svaroversigt holds results and the requisitions they belong to
- Quantitative findings are a table: header row, then data rows
"""

from typing import Any, List, Optional

from .base import UpstreamModel

class QuantitativeFindings(UpstreamModel):
    data: Optional[List[List[Optional[Any]]]] = None
    no_columns: Optional[int] = None
    no_rows: Optional[int] = None


class Undersoegelse(UpstreamModel):
    analyse_kode: Optional[str] = None
    eksaminator: Optional[str] = None
    materiale: Optional[str] = None
    oprindelses_sted: Optional[str] = None
    producent: Optional[str] = None
    quantitative_findings: Optional[QuantitativeFindings] = None
    undersoegelses_navn: Optional[str] = None


class Laboratorieresultat(UpstreamModel):
    analysetype_id: Optional[str] = None
    produktionsnummer_laboratorie: Optional[str] = None
    proevenummer_laboratorie: Optional[str] = None
    proevenummer_rekvirent: Optional[str] = None
    rekvisitions_id: Optional[str] = None
    resultat_status: Optional[str] = None
    resultat_statuskode: Optional[str] = None
    resultatdato: Optional[str] = None
    resultattype: Optional[str] = None
    reference_interval_tekst: Optional[str] = None
    undersoegelser: List[Undersoegelse] = []
    vaerdi: Optional[str] = None
    vaerditype: Optional[str] = None

    # Pathology narrative, HTML fragments
    materiale_html: Optional[str] = None
    diagnose_html: Optional[str] = None
    konklusion_html: Optional[str] = None
    mikroskopi_html: Optional[str] = None
    makroskopi_html: Optional[str] = None
    kliniske_informationer_html: Optional[str] = None


class Rekvisition(UpstreamModel):
    afsender_html: Optional[str] = None
    id: Optional[str] = None
    laboratorie_productions_nummer: Optional[str] = None
    laboratorie_proevenummer: Optional[str] = None
    laboratorieomraade: Optional[str] = None
    patient_cpr: Optional[str] = None
    patient_navn: Optional[str] = None
    proevetagningstidspunkt: Optional[str] = None
    rekvirent_html: Optional[str] = None
    rekvirents_organisation: Optional[str] = None
    rekvirents_proevenummer: Optional[str] = None
    svartidspunkt: Optional[str] = None


class Svaroversigt(UpstreamModel):
    laboratorieresultater: List[Laboratorieresultat] = []
    rekvisitioner: List[Rekvisition] = []


class LabsvarResponse(UpstreamModel):
    svaroversigt: Optional[Svaroversigt] = None
