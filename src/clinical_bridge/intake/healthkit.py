# ============================================================================
# src/clinical_bridge/intake/healthkit.py
# ============================================================================
"""
HealthKit Intake

Accepts FHIR resources exported from iOS HealthKit, either wrapped in a
HealthKitSubmission (raw resource dicts) or as an already parsed Bundle.

Every entry is accounted for: accepted, or rejected with an error code
- EMPTY_RESOURCE: entry holds no resource
- UNSUPPORTED_RESOURCE_TYPE: resource type outside the supported set
- PARSE_ERROR: resource dict does not validate as its FHIR type

Accepted resources are kept in process memory only.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple, Type
from uuid import uuid4
import logging

from pydantic import ValidationError

from fhir.resources.R4B.allergyintolerance import AllergyIntolerance
from fhir.resources.R4B.bundle import Bundle
from fhir.resources.R4B.condition import Condition
from fhir.resources.R4B.diagnosticreport import DiagnosticReport
from fhir.resources.R4B.immunization import Immunization
from fhir.resources.R4B.medicationstatement import MedicationStatement
from fhir.resources.R4B.observation import Observation
from fhir.resources.R4B.patient import Patient
from fhir.resources.R4B.procedure import Procedure

from ..fhir_utils.bundle import build_collection, temporal_anchor
from ..utils.exceptions import UnsupportedResourceError
from .models import (
    HealthKitProcessingError,
    HealthKitResourceMetadata,
    HealthKitSubmission,
    HealthKitSubmissionResponse,
)

logger = logging.getLogger(__name__)

EMPTY_RESOURCE = "EMPTY_RESOURCE"
UNSUPPORTED_RESOURCE_TYPE = "UNSUPPORTED_RESOURCE_TYPE"
PARSE_ERROR = "PARSE_ERROR"

SUPPORTED_RESOURCE_TYPES: Dict[str, Type[Any]] = {
    "Observation": Observation,
    "DiagnosticReport": DiagnosticReport,
    "Condition": Condition,
    "MedicationStatement": MedicationStatement,
    "Immunization": Immunization,
    "AllergyIntolerance": AllergyIntolerance,
    "Procedure": Procedure,
    "Patient": Patient,
}


def resource_class(resource_type: Optional[str]) -> Type[Any]:
    """FHIR model class for a supported resource type."""
    if resource_type not in SUPPORTED_RESOURCE_TYPES:
        raise UnsupportedResourceError(str(resource_type))
    return SUPPORTED_RESOURCE_TYPES[resource_type]


class HealthKitIntake:
    """
    In-memory store for HealthKit submissions.

    Resources are keyed "<resourceType>-<id>"; a resubmitted resource
    with the same id replaces the earlier one.
    """

    def __init__(self):
        self._resources: Dict[str, Any] = {}
        self._metadata: Dict[str, HealthKitResourceMetadata] = {}
        self.logger = logging.getLogger(__name__)

    # ========================================================================
    # SUBMISSION PROCESSING
    # ========================================================================

    def process_submission(self, submission: HealthKitSubmission) -> HealthKitSubmissionResponse:
        """
        Process a device submission of raw resource dicts.

        Args:
            submission: Device metadata plus bundle

        Returns:
            Processing statistics with one error per rejected entry
        """
        submission_id = str(uuid4())
        entries = submission.bundle.entry if submission.bundle else []
        self.logger.info(
            f"Processing HealthKit submission {submission_id} from device {submission.device_id} "
            f"({len(entries)} entries)"
        )

        errors: List[HealthKitProcessingError] = []
        accepted = 0
        for entry in entries:
            resource, error = self._parse_entry(entry.resource)
            if error is not None:
                errors.append(error)
                continue
            self._store(resource, submission.patient_identifier, submission.device_id)
            accepted += 1

        return self._response(submission_id, len(entries), accepted, errors)

    def process_bundle(
        self,
        bundle: Bundle,
        device_id: Optional[str] = None,
        patient_identifier: Optional[str] = None
    ) -> HealthKitSubmissionResponse:
        """Process an already parsed FHIR Bundle."""
        submission_id = str(uuid4())
        entries = bundle.entry or []
        self.logger.info(f"Processing FHIR Bundle {submission_id} with {len(entries)} entries")

        errors: List[HealthKitProcessingError] = []
        accepted = 0
        for entry in entries:
            resource = entry.resource
            if resource is None:
                errors.append(_error(EMPTY_RESOURCE, "Entry contains no resource"))
                continue

            resource_type = resource.get_resource_type()
            try:
                resource_class(resource_type)
            except UnsupportedResourceError as e:
                errors.append(_error(UNSUPPORTED_RESOURCE_TYPE, str(e), resource_type, resource.id))
                continue

            self._store(resource, patient_identifier, device_id)
            accepted += 1

        return self._response(submission_id, len(entries), accepted, errors)

    def _parse_entry(
        self,
        raw: Optional[Dict[str, Any]]
    ) -> Tuple[Optional[Any], Optional[HealthKitProcessingError]]:
        if not raw:
            return None, _error(EMPTY_RESOURCE, "Entry contains no resource")

        resource_type = raw.get("resourceType")
        resource_id = str(raw["id"]) if raw.get("id") is not None else None
        try:
            model = resource_class(resource_type)
        except UnsupportedResourceError as e:
            return None, _error(UNSUPPORTED_RESOURCE_TYPE, str(e), resource_type, resource_id)

        try:
            return model.model_validate(raw), None
        except (ValidationError, ValueError) as e:
            self.logger.warning(f"Failed to parse {resource_type} resource {resource_id}: {e}")
            return None, _error(PARSE_ERROR, f"Failed to parse resource: {e}", resource_type, resource_id)

    def _response(
        self,
        submission_id: str,
        processed: int,
        accepted: int,
        errors: List[HealthKitProcessingError]
    ) -> HealthKitSubmissionResponse:
        rejected = processed - accepted
        self.logger.info(
            f"Submission {submission_id} completed: {processed} processed, "
            f"{accepted} accepted, {rejected} rejected"
        )
        return HealthKitSubmissionResponse(
            success=rejected == 0,
            submission_id=submission_id,
            resources_processed=processed,
            resources_accepted=accepted,
            resources_rejected=rejected,
            errors=errors,
        )

    # ========================================================================
    # STORAGE
    # ========================================================================

    def _store(self, resource: Any, patient_identifier: Optional[str], device_id: Optional[str]) -> str:
        resource_type = resource.get_resource_type()
        if not resource.id:
            resource = resource.model_copy(update={"id": str(uuid4())})
        key = f"{resource_type}-{resource.id}"

        self._resources[key] = resource
        self._metadata[key] = HealthKitResourceMetadata(
            id=key,
            resource_type=resource_type,
            patient_identifier=patient_identifier,
            device_id=device_id,
            effective_date_time=temporal_anchor(resource),
            category=_first_category(resource),
            code=_first_code(resource),
            display_name=_display_name(resource),
        )
        self.logger.debug(f"Accepted {resource_type} resource: {resource.id}")
        return key

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_observations_for_patient(self, patient_identifier: str) -> List[Observation]:
        return [
            self._resources[key]
            for key, meta in self._metadata.items()
            if meta.patient_identifier == patient_identifier
            and meta.resource_type == "Observation"
        ]

    def observations_collection(self, self_url: str) -> Bundle:
        """All stored observations as a searchset collection."""
        observations = [
            resource for resource in self._resources.values()
            if resource.get_resource_type() == "Observation"
        ]
        return build_collection(observations, self_url)

    def resource_counts(self) -> Dict[str, int]:
        return dict(Counter(r.get_resource_type() for r in self._resources.values()))

    def metadata(self, key: str) -> Optional[HealthKitResourceMetadata]:
        return self._metadata.get(key)


def _error(
    code: str,
    message: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None
) -> HealthKitProcessingError:
    return HealthKitProcessingError(
        resource_type=resource_type,
        resource_id=resource_id,
        error_code=code,
        error_message=message,
    )


def _code(resource: Any):
    if resource.get_resource_type() in ("Observation", "Condition"):
        return resource.code
    return None


def _first_category(resource: Any) -> Optional[str]:
    if resource.get_resource_type() != "Observation" or not resource.category:
        return None
    codings = resource.category[0].coding or []
    return codings[0].code if codings else None


def _first_code(resource: Any) -> Optional[str]:
    code = _code(resource)
    if code is None or not code.coding:
        return None
    return code.coding[0].code


def _display_name(resource: Any) -> Optional[str]:
    code = _code(resource)
    if code is None:
        return None
    if code.text:
        return code.text
    return code.coding[0].display if code.coding else None
