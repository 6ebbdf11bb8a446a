# ============================================================================
# src/clinical_bridge/services/search_service.py
# ============================================================================
"""
Search Service

One searchset collection per category. Unlike the summary path, upstream
errors propagate to the caller.
"""

from typing import Optional
import asyncio
import logging

from fhir.resources.R4B.bundle import Bundle

from ..fhir_utils.appointment import map_appointments
from ..fhir_utils.bundle import build_collection, filter_by_period
from ..fhir_utils.condition import map_conditions
from ..fhir_utils.observation import map_observations
from ..fhir_utils.organization import map_organizations
from ..fhir_utils.patient import map_patients
from .client import UpstreamClient


class SearchService:
    """Searchset collections over the upstream client."""

    def __init__(self, client: UpstreamClient):
        self.client = client
        self.logger = logging.getLogger(__name__)

    async def search_conditions(self, self_url: str) -> Bundle:
        """Conditions from both diagnosis feeds, fetched in parallel."""
        forloeb, diagnoser = await asyncio.gather(
            self.client.fetch_forloebsoversigt(),
            self.client.fetch_diagnoser(),
        )
        conditions = map_conditions(forloeb, diagnoser)
        self.logger.info(f"Condition search: {len(conditions)} results")
        return build_collection(conditions, self_url)

    async def search_observations(
        self,
        self_url: str,
        fra: Optional[str] = None,
        til: Optional[str] = None
    ) -> Bundle:
        payload = await self.client.fetch_labsvar(fra, til)
        return build_collection(map_observations(payload), self_url)

    async def search_appointments(
        self,
        self_url: str,
        start: Optional[str] = None,
        end: Optional[str] = None
    ) -> Bundle:
        """
        Appointments, narrowed to [start, end] by appointment start.

        The upstream may ignore or widen the requested window, so the
        period filter runs on the mapped collection as well.
        """
        payload = await self.client.fetch_appointments(start, end)
        collection = build_collection(map_appointments(payload), self_url)
        return filter_by_period(collection, start, end)

    async def search_organizations(self, self_url: str) -> Bundle:
        payload = await self.client.fetch_organizations()
        return build_collection(map_organizations(payload), self_url)

    async def search_patients(
        self,
        self_url: str,
        name: Optional[str] = None,
        identifier: Optional[str] = None
    ) -> Bundle:
        payload = await self.client.fetch_person_selection()
        return build_collection(map_patients(payload, name, identifier), self_url)
