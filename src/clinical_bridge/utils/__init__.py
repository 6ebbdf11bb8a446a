# ============================================================================
# src/clinical_bridge/utils/__init__.py
# ============================================================================
"""
Utility modules for the clinical bridge.
"""

from .exceptions import (
    ClinicalBridgeError,
    InvalidDateFormat,
    SkippedRecord,
    MissingUpstreamData,
    ReferentialIntegrityViolation,
    UnsupportedResourceError,
)

from .logging import (
    setup_logging,
    setup_logging_from_settings,
    get_logger,
    JsonFormatter,
)

from .text import clean_html, blank_to_none, normalize_cpr

__all__ = [
    # Exceptions
    'ClinicalBridgeError',
    'InvalidDateFormat',
    'SkippedRecord',
    'MissingUpstreamData',
    'ReferentialIntegrityViolation',
    'UnsupportedResourceError',
    # Logging
    'setup_logging',
    'setup_logging_from_settings',
    'get_logger',
    'JsonFormatter',
    # Text
    'clean_html',
    'blank_to_none',
    'normalize_cpr',
]
