# ============================================================================
# src/clinical_bridge/fhir_utils/organization.py
# ============================================================================
"""
FHIR Organization builder for the core organization directory.
"""

from typing import List, Optional

from fhir.resources.R4B.address import Address
from fhir.resources.R4B.contactpoint import ContactPoint
from fhir.resources.R4B.meta import Meta
from fhir.resources.R4B.organization import Organization

from ..constants.code_systems import CVR_SYSTEM, ORGANIZATION_CATEGORY_SYSTEM
from ..upstream import CoreOrganization, CoreOrganizationResponse
from ..utils.text import blank_to_none, first_present, join_present
from .common import concept, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id, safe_id_token

COUNTRY_CODE = "DK"


def map_organization(record: CoreOrganization) -> Optional[Organization]:
    """
    Create FHIR Organization for one directory record.

    The name falls back to "Organization <id>"; a record with neither a
    name nor an id is dropped.
    """
    org_id = str(record.organization_id) if record.organization_id is not None else None
    name = first_present(record.display_name, record.name)
    if name is None:
        if org_id is None:
            return None
        name = f"Organization {org_id}"

    ident = identifier(CVR_SYSTEM, record.cvr_number)
    category = blank_to_none(record.category)
    homepage = blank_to_none(record.homepage)
    last_updated = normalize_or_none(record.last_updated, Boundary.START, "lastUpdated")

    return Organization(
        id=derive_id("org", org_id),
        meta=Meta(lastUpdated=last_updated) if last_updated else None,
        identifier=[ident] if ident else None,
        name=name,
        type=[
            concept(ORGANIZATION_CATEGORY_SYSTEM, safe_id_token(category), display=category, text=category)
        ] if category else None,
        telecom=[ContactPoint(system="url", value=homepage)] if homepage else None,
        address=[build_address(record)],
    )


def build_address(record: CoreOrganization) -> Address:
    """Street, house number, floor and door joined into one address line."""
    line = join_present([record.street, record.house_number_from, record.floor, record.door])
    return Address(
        line=[line] if line else None,
        city=blank_to_none(record.city),
        postalCode=str(record.zip_code) if record.zip_code is not None else None,
        district=blank_to_none(record.municipality),
        country=COUNTRY_CODE,
    )


def map_organizations(payload: Optional[CoreOrganizationResponse]) -> List[Organization]:
    if payload is None:
        return []
    return map_each(payload.organizations, map_organization, "organization")
