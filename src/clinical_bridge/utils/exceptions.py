# ============================================================================
# src/clinical_bridge/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the clinical bridge.
"""


class ClinicalBridgeError(Exception):
    """Base exception for all clinical bridge errors."""
    pass


class InvalidDateFormat(ClinicalBridgeError, ValueError):
    """Date text matches none of the supported patterns."""
    def __init__(self, raw: str):
        super().__init__(f"Unsupported date format: {raw!r}")
        self.raw = raw


class SkippedRecord(ClinicalBridgeError):
    """Upstream record could not be turned into a resource."""
    def __init__(self, message: str, record_type: str = "unknown"):
        super().__init__(message)
        self.record_type = record_type


class MissingUpstreamData(ClinicalBridgeError):
    """A whole category payload is absent or its fetch failed."""
    def __init__(self, category: str, reason: str = "no data"):
        super().__init__(f"No upstream data for {category}: {reason}")
        self.category = category
        self.reason = reason


class ReferentialIntegrityViolation(ClinicalBridgeError):
    """Summary document references and entries do not line up."""
    def __init__(self, message: str, problems: list = None):
        super().__init__(message)
        self.problems = problems or []


class UnsupportedResourceError(ClinicalBridgeError):
    """Resource type is not accepted by the intake."""
    def __init__(self, resource_type: str):
        super().__init__(f"Resource type '{resource_type}' is not supported")
        self.resource_type = resource_type
