# ============================================================================
# src/clinical_bridge/fhir_utils/identity.py
# ============================================================================
"""
Resource identity derivation

Ids are deterministic when the upstream record carries a natural key
(requisition id, ordination id, document id, ...) and random otherwise.
Every id is a valid FHIR id: [a-z0-9-], at most FHIR_ID_MAX_LENGTH chars.
"""

from typing import Optional, Set
from uuid import uuid4
import re

from ..config.fhir_config import fhir_settings

_INVALID_RUN_RE = re.compile(r'[^a-z0-9]+')


def safe_id_token(value: Optional[str]) -> str:
    """Lowercase value with every run of other characters collapsed to '-'."""
    if value is None:
        return ""
    return _INVALID_RUN_RE.sub("-", str(value).lower()).strip("-")


def derive_id(prefix: str, natural_key: Optional[str] = None) -> str:
    """
    Build a resource id from a prefix and an upstream natural key.

    Args:
        prefix: Resource family prefix, e.g. "lab" or "cond-forloeb"
        natural_key: Upstream key; a random token is used when absent
                     or when it normalizes to nothing

    Returns:
        Id of at most FHIR_ID_MAX_LENGTH characters
    """
    max_length = fhir_settings.FHIR_ID_MAX_LENGTH
    head = safe_id_token(prefix)
    token = safe_id_token(natural_key) or uuid4().hex

    candidate = f"{head}-{token}" if head else token
    return candidate[:max_length].rstrip("-")


class IdentityAllocator:
    """
    Hands out ids that are unique within one container (bundle).

    A repeated id gets a numeric suffix (-2, -3, ...) while staying
    within the length bound.
    """

    def __init__(self):
        self._taken: Set[str] = set()

    def allocate(self, candidate: Optional[str], prefix: str = "res") -> str:
        base = safe_id_token(candidate) or derive_id(prefix)
        base = base[:fhir_settings.FHIR_ID_MAX_LENGTH].rstrip("-")

        allocated = base
        counter = 2
        while allocated in self._taken:
            suffix = f"-{counter}"
            trimmed = base[:fhir_settings.FHIR_ID_MAX_LENGTH - len(suffix)].rstrip("-")
            allocated = f"{trimmed}{suffix}"
            counter += 1

        self._taken.add(allocated)
        return allocated

    def __contains__(self, resource_id: str) -> bool:
        return resource_id in self._taken

    def __len__(self) -> int:
        return len(self._taken)
