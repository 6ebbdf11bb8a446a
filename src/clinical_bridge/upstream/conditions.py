# ============================================================================
# src/clinical_bridge/upstream/conditions.py
# ============================================================================
"""
Diagnosis feeds
- forloebsoversigt: patient courses from the e-journal, one diagnosis each
- diagnoser: diagnosis list with an optional diagnosis type tag
"""

from typing import List, Optional

from .base import UpstreamModel

class NoegleRef(UpstreamModel):
    noegle: Optional[str] = None


class ForloebEntry(UpstreamModel):
    diagnose_kode: Optional[str] = None
    diagnose_navn: Optional[str] = None
    dato_fra: Optional[str] = None
    dato_til: Optional[str] = None
    dato_opdateret: Optional[str] = None
    sygehus_navn: Optional[str] = None
    afdelings_navn: Optional[str] = None
    id_noegle: Optional[NoegleRef] = None


class ForloebsoversigtResponse(UpstreamModel):
    person_nummer: Optional[str] = None
    forloeb: List[ForloebEntry] = []


class DiagnoseEntry(UpstreamModel):
    diagnose_kode: Optional[str] = None
    diagnose_navn: Optional[str] = None
    type: Optional[str] = None
    dato_fra: Optional[str] = None
    dato_til: Optional[str] = None


class DiagnoserResponse(UpstreamModel):
    diagnoser: List[DiagnoseEntry] = []
