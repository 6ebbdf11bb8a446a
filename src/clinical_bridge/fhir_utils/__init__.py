# ============================================================================
# src/clinical_bridge/fhir_utils/__init__.py
# ============================================================================
"""
FHIR normalization: resource mappers, merge, absence policy,
searchset collections and the patient summary document.
"""

from .dates import Boundary, normalize, normalize_or_none
from .identity import IdentityAllocator, derive_id
from .condition import map_conditions, map_diagnose_conditions, map_forloeb_conditions
from .observation import map_observations
from .medication_statement import map_medication_statements
from .immunization import map_immunizations
from .appointment import map_appointments
from .organization import map_organizations
from .patient import map_patient, map_patients
from .merge import merge
from .absence import apply_absence_policy
from .bundle import append_resources, build_collection, filter_by_period
from .summary import PatientSummaryBuilder, PatientSummaryData
from .validator import FHIRValidator, validate_bundle, get_validation_errors

__all__ = [
    "Boundary",
    "normalize",
    "normalize_or_none",
    "IdentityAllocator",
    "derive_id",
    "map_conditions",
    "map_diagnose_conditions",
    "map_forloeb_conditions",
    "map_observations",
    "map_medication_statements",
    "map_immunizations",
    "map_appointments",
    "map_organizations",
    "map_patient",
    "map_patients",
    "merge",
    "apply_absence_policy",
    "append_resources",
    "build_collection",
    "filter_by_period",
    "PatientSummaryBuilder",
    "PatientSummaryData",
    "FHIRValidator",
    "validate_bundle",
    "get_validation_errors",
]
