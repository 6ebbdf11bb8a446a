# ============================================================================
# src/clinical_bridge/fhir_utils/validator.py
# ============================================================================
"""
FHIR Bundle Validator

Structural checks that fhir.resources does not cover on its own:
1. Searchset collections: self link, total, unique fullUrls
2. Summary documents: cover Composition first, every section reference
   resolves to an entry, every clinical entry sits in exactly one section

Field-level validation is handled by fhir.resources on construction.
"""

from collections import Counter
from typing import Any, Dict, List, Tuple
import logging

from fhir.resources.R4B.bundle import Bundle

logger = logging.getLogger(__name__)


class FHIRValidator:
    """
    Bundle validator.

    Returns (is_valid, errors) instead of raising, so callers decide
    whether a problem is fatal.
    """

    def validate_bundle(self, bundle: Bundle) -> Tuple[bool, List[str]]:
        """
        Validate a searchset or document Bundle.

        Args:
            bundle: FHIR Bundle to validate

        Returns:
            (is_valid, errors)
        """
        errors = []
        entries = bundle.entry or []

        if bundle.type not in ("searchset", "document"):
            errors.append(f"Unexpected bundle type: {bundle.type}")

        if bundle.total is not None and bundle.total != len(entries):
            errors.append(f"Bundle total {bundle.total} != {len(entries)} entries")

        if not any(link.relation == "self" for link in (bundle.link or [])):
            errors.append("Bundle missing 'self' link")

        full_urls = [entry.fullUrl for entry in entries]
        for idx, entry in enumerate(entries):
            if not entry.fullUrl:
                errors.append(f"Entry {idx}: missing fullUrl")
            if entry.resource is None:
                errors.append(f"Entry {idx}: missing resource")

        duplicates = [url for url, count in Counter(full_urls).items() if url and count > 1]
        for url in duplicates:
            errors.append(f"Duplicate fullUrl: {url}")

        self._log(errors, "Bundle")
        return len(errors) == 0, errors

    def validate_document(self, bundle: Bundle) -> Tuple[bool, List[str]]:
        """
        Validate the referential integrity of a summary document.

        Rules:
        - The first entry is a Composition
        - The Composition subject resolves to an entry
        - Every section reference resolves to an entry
        - Every entry other than the Composition and its subject is
          referenced by exactly one section

        Returns:
            (is_valid, errors)
        """
        errors = []
        entries = bundle.entry or []

        if bundle.type != "document":
            errors.append(f"Document bundle has type '{bundle.type}'")

        if not entries or entries[0].resource is None \
                or entries[0].resource.get_resource_type() != "Composition":
            errors.append("First entry is not a Composition")
            self._log(errors, "Document")
            return False, errors

        by_url: Dict[str, Any] = {entry.fullUrl: entry.resource for entry in entries}
        composition = entries[0].resource

        subject_url = composition.subject.reference if composition.subject else None
        if subject_url not in by_url:
            errors.append(f"Composition subject '{subject_url}' does not resolve")

        referenced = Counter()
        for section in composition.section or []:
            for ref in section.entry or []:
                if ref.reference not in by_url:
                    errors.append(
                        f"Section '{section.title}' reference '{ref.reference}' does not resolve"
                    )
                referenced[ref.reference] += 1

        for entry in entries[1:]:
            if entry.fullUrl == subject_url:
                continue
            count = referenced.get(entry.fullUrl, 0)
            if count != 1:
                errors.append(
                    f"Entry '{entry.fullUrl}' is referenced by {count} sections, expected 1"
                )

        self._log(errors, "Document")
        return len(errors) == 0, errors

    def _log(self, errors: List[str], kind: str) -> None:
        if errors:
            logger.warning(f"{kind} validation found {len(errors)} errors")
            for error in errors:
                logger.warning(f"  - {error}")


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def validate_bundle(bundle: Bundle) -> bool:
    """
    Quick bundle validation.

    Returns:
        True if valid
    """
    is_valid, _ = FHIRValidator().validate_bundle(bundle)
    return is_valid


def get_validation_errors(bundle: Bundle) -> List[str]:
    """
    Get list of validation errors for a bundle (document rules included
    for document bundles).

    Returns:
        List of error messages (empty if valid)
    """
    validator = FHIRValidator()
    _, errors = validator.validate_bundle(bundle)
    if bundle.type == "document":
        _, document_errors = validator.validate_document(bundle)
        errors.extend(document_errors)
    return errors
