# ============================================================================
# src/clinical_bridge/services/client.py
# ============================================================================
"""
Upstream Client Interface

Defines the fetch operations the services need from the upstream health
portal. Transport, authentication and header forwarding live in the
concrete implementation; every method returns parsed payload models
(or None / empty list when the upstream has nothing).
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from ..upstream import (
    AppointmentsResponse,
    CoreOrganizationResponse,
    DiagnoserResponse,
    ForloebsoversigtResponse,
    LabsvarResponse,
    MedicationCardEntry,
    PersonSelectionResponse,
    VaccinationRecord,
)


class UpstreamClient(ABC):
    """
    Abstract base class for upstream clients.

    All fetches are async and independent of each other, so callers may
    run them concurrently.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def fetch_person_selection(self) -> Optional[PersonSelectionResponse]:
        """Persons the caller may act for."""
        pass

    @abstractmethod
    async def fetch_diagnoser(self) -> Optional[DiagnoserResponse]:
        pass

    @abstractmethod
    async def fetch_forloebsoversigt(self) -> Optional[ForloebsoversigtResponse]:
        pass

    @abstractmethod
    async def fetch_medication_card(self) -> List[MedicationCardEntry]:
        pass

    @abstractmethod
    async def fetch_effectuated_vaccinations(self) -> List[VaccinationRecord]:
        pass

    @abstractmethod
    async def fetch_labsvar(
        self,
        fra: Optional[str] = None,
        til: Optional[str] = None
    ) -> Optional[LabsvarResponse]:
        """
        Lab answers in a time window.

        Args:
            fra: Window start, local date-time text
            til: Window end, local date-time text
        """
        pass

    @abstractmethod
    async def fetch_appointments(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None
    ) -> Optional[AppointmentsResponse]:
        pass

    @abstractmethod
    async def fetch_organizations(self) -> Optional[CoreOrganizationResponse]:
        pass
