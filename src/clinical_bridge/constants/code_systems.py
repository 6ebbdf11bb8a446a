# ============================================================================
# src/clinical_bridge/constants/code_systems.py
# ============================================================================
"""
Code systems and identifier namespaces
- HL7 terminology systems used by status/category codings
- Upstream (sundhed.dk) code and identifier systems
"""

# HL7 terminology
CONDITION_CLINICAL_SYSTEM = "http://terminology.hl7.org/CodeSystem/condition-clinical"
CONDITION_VERIFICATION_SYSTEM = "http://terminology.hl7.org/CodeSystem/condition-ver-status"
OBSERVATION_CATEGORY_SYSTEM = "http://terminology.hl7.org/CodeSystem/observation-category"
LIST_EMPTY_REASON_SYSTEM = "http://terminology.hl7.org/CodeSystem/list-empty-reason"
LOINC_SYSTEM = "http://loinc.org"
ABSENT_UNKNOWN_SYSTEM = "http://hl7.org/fhir/uv/ips/CodeSystem/absent-unknown-uv-ips"

# Person / organization identifiers
CPR_SYSTEM = "urn:dk:cpr"
CVR_SYSTEM = "urn:dk:cvr"

# Upstream code systems
DIAGNOSIS_CODE_SYSTEM = "https://www.sundhed.dk/diagnosekode"
DIAGNOSIS_TYPE_SYSTEM = "https://www.sundhed.dk/diagnosetype"
LAB_CODE_SYSTEM = "https://www.sundhed.dk/codes/labsvar"
ACTIVE_SUBSTANCE_SYSTEM = "https://www.sundhed.dk/medication/active-substance"
APPOINTMENT_TYPE_SYSTEM = "https://www.sundhed.dk/appointments/type"
ORGANIZATION_CATEGORY_SYSTEM = "https://www.sundhed.dk/organization/category"

# Upstream identifier systems
FORLOEB_IDENTIFIER_SYSTEM = "https://www.sundhed.dk/ejournal/forloeb"
DIAGNOSER_IDENTIFIER_SYSTEM = "https://www.sundhed.dk/diagnoser"
LAB_REQUISITION_SYSTEM = "https://www.sundhed.dk/labsvar/rekvisition"
ORDINATION_SYSTEM = "https://www.sundhed.dk/medication/ordination"
VACCINATION_ID_SYSTEM = "https://www.sundhed.dk/vaccination/id"
APPOINTMENT_DOCUMENT_SYSTEM = "https://www.sundhed.dk/appointments/documentId"
