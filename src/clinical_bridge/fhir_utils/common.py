# ============================================================================
# src/clinical_bridge/fhir_utils/common.py
# ============================================================================
"""
Small building blocks shared by the resource mappers.
"""

from typing import Any, Callable, Iterable, List, Optional
import logging

from pydantic import ValidationError

from fhir.resources.R4B.codeableconcept import CodeableConcept
from fhir.resources.R4B.coding import Coding
from fhir.resources.R4B.identifier import Identifier
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import CPR_SYSTEM
from ..utils.exceptions import InvalidDateFormat, SkippedRecord
from ..utils.text import blank_to_none, normalize_cpr

logger = logging.getLogger(__name__)

UNKNOWN_PATIENT_DISPLAY = "Unknown patient"


def cpr_reference(cpr: Optional[str], display: Optional[str] = None) -> Reference:
    """
    Weak reference to a person by CPR identifier.

    Falls back to a display-only reference when no CPR number is known,
    since every clinical resource here needs a subject.
    """
    cpr = normalize_cpr(cpr)
    display = blank_to_none(display)
    if cpr:
        return Reference(
            identifier=Identifier(system=CPR_SYSTEM, value=cpr),
            display=display,
        )
    return Reference(display=display or UNKNOWN_PATIENT_DISPLAY)


def display_reference(display: Optional[str]) -> Optional[Reference]:
    display = blank_to_none(display)
    return Reference(display=display) if display else None


def urn_reference(resource_id: str) -> Reference:
    return Reference(reference=f"urn:uuid:{resource_id}")


def coding(system: str, code: Optional[str], display: Optional[str] = None) -> Coding:
    return Coding(system=system, code=blank_to_none(code), display=blank_to_none(display))


def concept(
    system: Optional[str] = None,
    code: Optional[str] = None,
    display: Optional[str] = None,
    text: Optional[str] = None
) -> CodeableConcept:
    """
    CodeableConcept with at most one coding.

    The coding is only added when a code is present.
    """
    code = blank_to_none(code)
    codings = [coding(system, code, display)] if system and code else None
    return CodeableConcept(coding=codings, text=blank_to_none(text))


def identifier(system: str, value: Any) -> Optional[Identifier]:
    if value is None:
        return None
    value = blank_to_none(str(value))
    return Identifier(system=system, value=value) if value else None


def map_each(
    records: Optional[Iterable[Any]],
    mapper: Callable[..., Any],
    record_type: str,
    **kwargs
) -> List[Any]:
    """
    Apply a record mapper to every record, isolating failures.

    A record that maps to None, raises SkippedRecord, fails model
    validation or carries an unusable date is left out; the rest of
    the batch is unaffected.
    """
    mapped = []
    for index, record in enumerate(records or []):
        try:
            resource = mapper(record, **kwargs)
        except SkippedRecord as e:
            logger.debug(f"Skipped {record_type} record #{index}: {e}")
            continue
        except (ValidationError, InvalidDateFormat) as e:
            logger.debug(f"Skipped {record_type} record #{index}, not mappable: {e}")
            continue

        if resource is None:
            logger.debug(f"Skipped {record_type} record #{index}: no code or display")
            continue
        mapped.append(resource)

    logger.debug(f"Mapped {len(mapped)} {record_type} resource(s)")
    return mapped
