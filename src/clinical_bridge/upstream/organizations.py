# ============================================================================
# src/clinical_bridge/upstream/organizations.py
# ============================================================================
"""
Core organization directory
"""

from typing import List, Optional

from .base import UpstreamModel

class CoreOrganization(UpstreamModel):
    organization_id: Optional[int] = None
    cvr_number: Optional[int] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    category: Optional[str] = None
    street: Optional[str] = None
    house_number_from: Optional[str] = None
    floor: Optional[str] = None
    door: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[int] = None
    municipality: Optional[str] = None
    homepage: Optional[str] = None
    last_updated: Optional[str] = None


class CoreOrganizationResponse(UpstreamModel):
    organizations: List[CoreOrganization] = []
