"""
Device data intake (HealthKit exports).
"""

from .healthkit import HealthKitIntake, SUPPORTED_RESOURCE_TYPES
from .models import (
    HealthKitSubmission,
    HealthKitFhirBundle,
    HealthKitBundleEntry,
    HealthKitSubmissionResponse,
    HealthKitProcessingError,
)
