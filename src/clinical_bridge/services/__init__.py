"""
Services orchestrating upstream fetches and FHIR mapping.
"""

from .client import UpstreamClient
from .search_service import SearchService
from .summary_service import PatientSummaryService

__all__ = ["UpstreamClient", "SearchService", "PatientSummaryService"]
