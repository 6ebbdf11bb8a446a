# ============================================================================
# src/clinical_bridge/fhir_utils/summary.py
# ============================================================================
"""
International Patient Summary (IPS) Document Builder

Turns the per-category upstream payloads of one patient into a FHIR
document Bundle:

    mappers -> merge -> absence policy -> assemble -> integrity check

Entry order:
1. Composition (cover, one section per category)
2. Patient (Composition subject)
3. Section resources in section order: Problems, Medications,
   Allergies (always empty, unavailable), Immunizations, Results
   (left out when empty)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4
import logging

from fhir.resources.R4B.bundle import Bundle, BundleEntry, BundleLink
from fhir.resources.R4B.composition import Composition, CompositionSection
from fhir.resources.R4B.meta import Meta
from fhir.resources.R4B.patient import Patient
from fhir.resources.R4B.reference import Reference

from ..config.fhir_config import fhir_settings
from ..config.summary_config import summary_settings
from ..constants.code_systems import LIST_EMPTY_REASON_SYSTEM, LOINC_SYSTEM
from ..constants.ips import (
    OPTIONAL_SECTIONS,
    PATIENT_SUMMARY_DOC_CODE,
    PATIENT_SUMMARY_DOC_DISPLAY,
    SECTION_INFO,
    UNAVAILABLE_SECTIONS,
    SummarySection,
    profile_for,
)
from ..upstream import (
    DiagnoserResponse,
    ForloebsoversigtResponse,
    LabsvarResponse,
    MedicationCardEntry,
    PersonDelegationData,
    VaccinationRecord,
)
from ..utils.exceptions import ReferentialIntegrityViolation
from .absence import apply_absence_policy
from .common import concept, identifier, urn_reference
from .condition import map_diagnose_conditions, map_forloeb_conditions
from .identity import IdentityAllocator, derive_id
from .immunization import map_immunizations
from .medication_statement import map_medication_statements
from .merge import merge
from .observation import map_observations
from .patient import map_patient
from .validator import FHIRValidator

logger = logging.getLogger(__name__)


@dataclass
class PatientSummaryData:
    """Upstream payloads for one summary; None means no data for that category."""
    cpr: Optional[str] = None
    patient: Optional[PersonDelegationData] = None
    conditions: Optional[DiagnoserResponse] = None
    forloeb: Optional[ForloebsoversigtResponse] = None
    medications: Optional[List[MedicationCardEntry]] = None
    immunizations: Optional[List[VaccinationRecord]] = None
    observations: Optional[LabsvarResponse] = None
    missing: List[str] = field(default_factory=list)


class PatientSummaryBuilder:
    """
    IPS document builder.

    build() runs the whole pipeline from upstream payloads; assemble()
    takes already-mapped resources.
    """

    def __init__(self, include_profiles: Optional[bool] = None):
        if include_profiles is None:
            include_profiles = fhir_settings.FHIR_INCLUDE_PROFILES
        self.include_profiles = include_profiles
        self.validator = FHIRValidator()
        self.logger = logging.getLogger(__name__)

    # ========================================================================
    # ENTRY POINTS
    # ========================================================================

    def build(self, data: PatientSummaryData, self_url: str) -> Bundle:
        """
        Build the summary document from upstream payloads.

        Args:
            data: Fetched payloads; absent categories become sentinels
            self_url: URL of the summary request

        Returns:
            FHIR document Bundle
        """
        patient = map_patient(data.patient, data.cpr)
        subject = urn_reference(patient.id)

        problems = merge(
            map_diagnose_conditions(data.conditions, subject),
            map_forloeb_conditions(data.forloeb, subject),
        )
        medications = map_medication_statements(data.medications, subject)
        immunizations = map_immunizations(data.immunizations, subject)
        results = map_observations(data.observations, subject)

        categorized = {
            SummarySection.PROBLEMS: apply_absence_policy(problems, SummarySection.PROBLEMS, subject),
            SummarySection.MEDICATIONS: apply_absence_policy(medications, SummarySection.MEDICATIONS, subject),
            SummarySection.ALLERGIES: [],
            SummarySection.IMMUNIZATIONS: apply_absence_policy(
                immunizations, SummarySection.IMMUNIZATIONS, subject
            ),
            SummarySection.RESULTS: results,
        }

        for category in data.missing:
            self.logger.warning(
                f"Summary built without upstream data for {category}",
                extra={"category": category}
            )

        return self.assemble(patient, categorized, self_url)

    def assemble(
        self,
        patient: Patient,
        categorized: Dict[SummarySection, Sequence[Any]],
        self_url: str
    ) -> Bundle:
        """
        Assemble a document Bundle from mapped resources.

        Args:
            patient: Composition subject
            categorized: Resources per summary section
            self_url: URL of the summary request

        Returns:
            Document Bundle that passed the integrity check

        Raises:
            ReferentialIntegrityViolation: when references and entries
                do not line up
        """
        allocator = IdentityAllocator()
        patient = self._place(patient, allocator)
        subject = urn_reference(patient.id)

        sections = []
        section_resources: List[Any] = []
        for section, info in SECTION_INFO.items():
            resources = [
                self._place(resource, allocator)
                for resource in (categorized.get(section) or [])
                if resource is not None
            ]
            if not resources and section in OPTIONAL_SECTIONS:
                continue
            sections.append(self._create_section(section, resources))
            section_resources.extend(resources)

        composition = self._create_composition(subject, sections, allocator)

        ordered = [composition, patient] + section_resources
        now = datetime.now(timezone.utc)
        bundle = Bundle(
            id=derive_id("ips"),
            identifier=identifier(summary_settings.SUMMARY_IDENTIFIER_SYSTEM, str(uuid4())),
            type="document",
            timestamp=now,
            link=[BundleLink(relation="self", url=self_url)],
            entry=[
                BundleEntry(fullUrl=f"urn:uuid:{resource.id}", resource=resource)
                for resource in ordered
            ],
            total=len(ordered),
        )

        self.check_integrity(bundle)

        self.logger.info(
            f"Built IPS document: {len(ordered)} entries, {len(sections)} sections"
        )
        return bundle

    def check_integrity(self, bundle: Bundle) -> None:
        """Raise ReferentialIntegrityViolation unless the document is consistent."""
        is_valid, errors = self.validator.validate_document(bundle)
        if not is_valid:
            self.logger.error(f"IPS document failed integrity check: {'; '.join(errors)}")
            raise ReferentialIntegrityViolation("Summary document is inconsistent", errors)

    # ========================================================================
    # RESOURCE CREATORS
    # ========================================================================

    def _place(self, resource: Any, allocator: IdentityAllocator) -> Any:
        """Copy of resource with a document-unique id and, if enabled, its IPS profile."""
        resource_id = allocator.allocate(
            resource.id, prefix=resource.get_resource_type().lower()
        )
        if resource_id != resource.id:
            resource = resource.model_copy(update={"id": resource_id})
        return self._profiled(resource)

    def _profiled(self, resource: Any) -> Any:
        profile = profile_for(resource.get_resource_type()) if self.include_profiles else None
        if profile is None:
            return resource
        return resource.model_copy(update={"meta": self._with_profile(resource.meta, profile)})

    def _with_profile(self, meta: Optional[Meta], profile: str) -> Meta:
        if meta is None:
            return Meta(profile=[profile])
        profiles = list(meta.profile or [])
        if profile not in profiles:
            profiles.append(profile)
        return meta.model_copy(update={"profile": profiles})

    def _create_section(self, section: SummarySection, resources: List[Any]) -> CompositionSection:
        info = SECTION_INFO[section]
        empty_reason = None
        if not resources:
            # Only sections without any upstream feed end up here
            empty_reason = concept(LIST_EMPTY_REASON_SYSTEM, "unavailable", display="Unavailable")
            if section not in UNAVAILABLE_SECTIONS:
                self.logger.debug(f"Section '{info.title}' is empty")

        return CompositionSection(
            title=info.title,
            code=concept(LOINC_SYSTEM, info.code, display=info.display),
            entry=[urn_reference(resource.id) for resource in resources] or None,
            emptyReason=empty_reason,
        )

    def _create_composition(
        self,
        subject: Reference,
        sections: List[CompositionSection],
        allocator: IdentityAllocator
    ) -> Composition:
        composition = Composition(
            id=allocator.allocate(derive_id("composition")),
            status="final",
            type=concept(LOINC_SYSTEM, PATIENT_SUMMARY_DOC_CODE, display=PATIENT_SUMMARY_DOC_DISPLAY),
            subject=subject,
            date=datetime.now(timezone.utc),
            author=[Reference(display=summary_settings.SUMMARY_AUTHOR_DISPLAY)],
            title=summary_settings.SUMMARY_TITLE,
            section=sections or None,
        )
        return self._profiled(composition)
