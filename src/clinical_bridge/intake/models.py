# ============================================================================
# src/clinical_bridge/intake/models.py
# ============================================================================
"""
HealthKit submission models

Device apps (Apple HKFHIRResource, HealthKitOnFHIR, HealthKit-on-FHIR)
post a FHIR bundle of raw resource dicts wrapped with device metadata.
Resource dicts stay raw here and are parsed one by one on intake.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IntakeModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class HealthKitBundleEntry(IntakeModel):
    full_url: Optional[str] = None
    resource: Optional[Dict[str, Any]] = None


class HealthKitFhirBundle(IntakeModel):
    resource_type: str = "Bundle"
    type: str = "collection"
    entry: List[HealthKitBundleEntry] = []


class HealthKitSubmission(IntakeModel):
    device_id: Optional[str] = None
    app_version: Optional[str] = None
    submission_time: Optional[datetime] = None
    patient_identifier: Optional[str] = None
    bundle: Optional[HealthKitFhirBundle] = None


class HealthKitProcessingError(IntakeModel):
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    error_code: str
    error_message: str


class HealthKitSubmissionResponse(IntakeModel):
    success: bool
    submission_id: str
    resources_processed: int = 0
    resources_accepted: int = 0
    resources_rejected: int = 0
    errors: List[HealthKitProcessingError] = []
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HealthKitResourceMetadata(IntakeModel):
    """Lookup data kept next to each stored resource."""
    id: str
    resource_type: str
    patient_identifier: Optional[str] = None
    device_id: Optional[str] = None
    effective_date_time: Optional[datetime] = None
    received_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    category: Optional[str] = None
    code: Optional[str] = None
    display_name: Optional[str] = None
