# ============================================================================
# src/clinical_bridge/upstream/__init__.py
# ============================================================================
"""
Upstream payload models, one per source.
"""

from .base import UpstreamModel
from .conditions import (
    NoegleRef,
    ForloebEntry,
    ForloebsoversigtResponse,
    DiagnoseEntry,
    DiagnoserResponse,
)
from .labs import (
    QuantitativeFindings,
    Undersoegelse,
    Laboratorieresultat,
    Rekvisition,
    Svaroversigt,
    LabsvarResponse,
)
from .medications import MedicationCardStatus, MedicationCardEntry
from .vaccinations import VaccinationRecord
from .appointments import (
    AddressDetailed,
    PlaceDetailed,
    AppointmentPerson,
    AppointmentItem,
    AppointmentsResponse,
)
from .organizations import CoreOrganization, CoreOrganizationResponse
from .persons import PersonDelegationData, PersonSelectionResponse
