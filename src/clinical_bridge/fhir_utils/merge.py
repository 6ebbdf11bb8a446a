# ============================================================================
# src/clinical_bridge/fhir_utils/merge.py
# ============================================================================
"""
Merge layer for categories fed by more than one upstream source.
"""

from typing import Any, Iterable, List, Optional


def merge(*sources: Optional[Iterable[Any]]) -> List[Any]:
    """
    Concatenate mapped resource lists in the order given.

    Absent sources and None entries are skipped. No cross-source
    de-duplication is attempted: the same diagnosis reported by two
    feeds appears twice.
    """
    merged = []
    for source in sources:
        if source is None:
            continue
        merged.extend(resource for resource in source if resource is not None)
    return merged
