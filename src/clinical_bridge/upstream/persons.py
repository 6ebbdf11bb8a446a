# ============================================================================
# src/clinical_bridge/upstream/persons.py
# ============================================================================
"""
Person selection (who the logged-in user may act for)
"""

from typing import List, Optional

from ..utils.text import normalize_cpr
from .base import UpstreamModel

class PersonDelegationData(UpstreamModel):
    id: Optional[str] = None
    cpr: Optional[str] = None
    name: Optional[str] = None
    relation_type: Optional[str] = None


class PersonSelectionResponse(UpstreamModel):
    person_delegation_data: List[PersonDelegationData] = []

    def find(self, cpr: Optional[str]) -> Optional[PersonDelegationData]:
        """Delegation entry for a CPR number, if listed (dashes ignored)."""
        cpr = normalize_cpr(cpr)
        if not cpr:
            return None
        return next(
            (p for p in self.person_delegation_data if normalize_cpr(p.cpr) == cpr), None
        )
