# ============================================================================
# src/clinical_bridge/services/summary_service.py
# ============================================================================
"""
Patient Summary Service

Fetches every category needed for a summary concurrently, then hands
the joined payloads to the document builder. A fetch that fails or
exceeds its timeout degrades to "no data" for that category; the
absence policy turns it into a sentinel entry.
"""

from calendar import monthrange
from datetime import date
from typing import Any, Awaitable, Dict, Optional, Tuple
import asyncio
import logging

from fhir.resources.R4B.bundle import Bundle

from ..config.summary_config import summary_settings
from ..utils.text import normalize_cpr
from ..fhir_utils.summary import PatientSummaryBuilder, PatientSummaryData
from ..utils.exceptions import MissingUpstreamData
from .client import UpstreamClient

logger = logging.getLogger(__name__)

PATIENT_ID_PREFIX = "pat-"


def months_before(day: date, months: int) -> date:
    """Same day `months` calendar months earlier, clamped to month end."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


def lab_window(today: date, lookback_months: int) -> Tuple[str, str]:
    """(fra, til) local date-time bounds for the lab lookback window."""
    fra = months_before(today, lookback_months)
    return f"{fra.isoformat()}T00:00:00", f"{today.isoformat()}T23:59:59"


def cpr_from_patient_id(patient_id: Optional[str]) -> Optional[str]:
    """Patient ids have the form pat-<cpr>."""
    if not patient_id:
        return None
    if patient_id.startswith(PATIENT_ID_PREFIX):
        patient_id = patient_id[len(PATIENT_ID_PREFIX):]
    return normalize_cpr(patient_id)


class PatientSummaryService:
    """
    Concurrent fan-out over the upstream client, single join before
    document assembly.
    """

    def __init__(
        self,
        client: UpstreamClient,
        builder: Optional[PatientSummaryBuilder] = None,
        fetch_timeout: Optional[float] = None,
        lab_lookback_months: Optional[int] = None
    ):
        self.client = client
        self.builder = builder or PatientSummaryBuilder()
        self.fetch_timeout = fetch_timeout or summary_settings.SUMMARY_FETCH_TIMEOUT
        self.lab_lookback_months = lab_lookback_months or summary_settings.SUMMARY_LAB_LOOKBACK_MONTHS
        self.logger = logging.getLogger(__name__)

    async def fetch_summary_data(
        self,
        patient_id: Optional[str],
        today: Optional[date] = None
    ) -> PatientSummaryData:
        """
        Fetch all summary categories in parallel.

        Args:
            patient_id: Patient id (pat-<cpr>) or bare CPR number
            today: Reference day for the lab window (defaults to today)

        Returns:
            PatientSummaryData; failed categories are None and listed
            in `missing`
        """
        cpr = cpr_from_patient_id(patient_id)
        fra, til = lab_window(today or date.today(), self.lab_lookback_months)

        fetches: Dict[str, Awaitable[Any]] = {
            "patient": self.client.fetch_person_selection(),
            "conditions": self.client.fetch_diagnoser(),
            "forloeb": self.client.fetch_forloebsoversigt(),
            "medications": self.client.fetch_medication_card(),
            "immunizations": self.client.fetch_effectuated_vaccinations(),
            "observations": self.client.fetch_labsvar(fra, til),
        }

        self.logger.info(f"Fetching {len(fetches)} summary categories in parallel")
        results = await asyncio.gather(
            *(asyncio.wait_for(fetch, timeout=self.fetch_timeout) for fetch in fetches.values()),
            return_exceptions=True
        )

        payloads: Dict[str, Any] = {}
        missing = []
        for category, result in zip(fetches.keys(), results):
            if isinstance(result, asyncio.TimeoutError):
                result = MissingUpstreamData(category, f"timed out after {self.fetch_timeout}s")
            if isinstance(result, BaseException):
                if not isinstance(result, MissingUpstreamData):
                    result = MissingUpstreamData(category, f"{type(result).__name__}: {result}")
                self.logger.warning(str(result), extra={"category": category})
                missing.append(category)
                payloads[category] = None
            else:
                payloads[category] = result

        selection = payloads.pop("patient")
        person = selection.find(cpr) if selection is not None else None

        return PatientSummaryData(cpr=cpr, patient=person, missing=missing, **payloads)

    async def summary(
        self,
        patient_id: Optional[str],
        self_url: str,
        today: Optional[date] = None
    ) -> Bundle:
        """Fetch and assemble the patient summary document."""
        data = await self.fetch_summary_data(patient_id, today)
        return self.builder.build(data, self_url)
