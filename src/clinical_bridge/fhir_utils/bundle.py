# ============================================================================
# src/clinical_bridge/fhir_utils/bundle.py
# ============================================================================
"""
Searchset collection builder.

A collection wraps a homogeneous list of resources with a self link,
one urn:uuid fullUrl per entry and total == number of entries.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import logging

from fhir.resources.R4B.bundle import Bundle, BundleEntry, BundleLink

from .dates import Boundary, as_utc, normalize
from .identity import IdentityAllocator

logger = logging.getLogger(__name__)

BoundValue = Optional[Union[str, datetime]]


def build_collection(resources: Iterable[Any], self_url: str) -> Bundle:
    """
    Wrap resources in a searchset Bundle.

    Ids are made unique within the bundle; a resource whose id is already
    taken is copied with a suffixed id.

    Args:
        resources: Mapped resources, in result order
        self_url: URL of the request that produced the collection

    Returns:
        Searchset Bundle with self link and total
    """
    allocator = IdentityAllocator()
    entries = [_entry(resource, allocator) for resource in resources if resource is not None]

    return Bundle(
        type="searchset",
        link=[BundleLink(relation="self", url=self_url)],
        entry=entries or None,
        total=len(entries),
    )


def append_resources(collection: Bundle, resources: Iterable[Any]) -> Bundle:
    """Add resources to an existing collection and recompute its total."""
    allocator = IdentityAllocator()
    entries = list(collection.entry or [])
    for entry in entries:
        allocator.allocate(entry.resource.id)

    entries.extend(_entry(resource, allocator) for resource in resources if resource is not None)
    collection.entry = entries or None
    collection.total = len(entries)
    return collection


def resources_of(collection: Bundle) -> List[Any]:
    return [entry.resource for entry in (collection.entry or [])]


def _entry(resource: Any, allocator: IdentityAllocator) -> BundleEntry:
    resource_id = allocator.allocate(resource.id, prefix=resource.get_resource_type().lower())
    if resource_id != resource.id:
        resource = resource.model_copy(update={"id": resource_id})
    return BundleEntry(fullUrl=f"urn:uuid:{resource_id}", resource=resource)


# ============================================================================
# PERIOD FILTER
# ============================================================================

def _first(*values):
    return next((v for v in values if v is not None), None)


def _period_start(period) -> Optional[Any]:
    return period.start if period is not None else None


# Resource type tag -> temporal anchor (start of the anchor for periods)
ANCHORS: Dict[str, Callable[[Any], Any]] = {
    "Appointment": lambda r: r.start,
    "Condition": lambda r: _first(r.onsetDateTime, _period_start(r.onsetPeriod)),
    "Observation": lambda r: _first(
        r.effectiveDateTime, _period_start(r.effectivePeriod), r.effectiveInstant
    ),
    "MedicationStatement": lambda r: _first(
        _period_start(r.effectivePeriod), r.effectiveDateTime
    ),
    "Immunization": lambda r: r.occurrenceDateTime,
    "DiagnosticReport": lambda r: _first(r.effectiveDateTime, _period_start(r.effectivePeriod)),
}


def temporal_anchor(resource: Any) -> Optional[datetime]:
    """UTC start instant of a resource's temporal anchor, if it has one."""
    extractor = ANCHORS.get(resource.get_resource_type())
    if extractor is None:
        return None
    return as_utc(extractor(resource))


def filter_by_period(collection: Bundle, start: BoundValue = None, end: BoundValue = None) -> Bundle:
    """
    Keep the entries whose temporal anchor lies in [start, end].

    Args:
        collection: Searchset Bundle to filter
        start: Lower bound, normalized with START; None for unbounded
        end: Upper bound, normalized with END; None for unbounded

    Returns:
        The collection itself when both bounds are absent, else a new
        Bundle with the same link and a recomputed total. Entries without
        an anchor are excluded whenever a bound is given.

    Raises:
        InvalidDateFormat: when a bound is not a supported date
    """
    lower = _bound(start, Boundary.START)
    upper = _bound(end, Boundary.END)
    if lower is None and upper is None:
        return collection

    kept = []
    for entry in collection.entry or []:
        anchor = temporal_anchor(entry.resource)
        if anchor is None:
            continue
        if lower is not None and anchor < lower:
            continue
        if upper is not None and anchor > upper:
            continue
        kept.append(entry)

    logger.debug(f"Period filter kept {len(kept)} of {len(collection.entry or [])} entries")
    return Bundle(
        type=collection.type,
        link=collection.link,
        entry=kept or None,
        total=len(kept),
    )


def _bound(value: BoundValue, boundary: Boundary) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if not value.strip():
        return None
    return normalize(value, boundary)
