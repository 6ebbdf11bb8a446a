# ============================================================================
# src/clinical_bridge/fhir_utils/appointment.py
# ============================================================================
"""
FHIR Appointment builder.

Every appointment is booked. Patient, performer and location become
accepted participants holding weak (display / identifier) references.
"""

from typing import List, Optional

from fhir.resources.R4B.appointment import Appointment, AppointmentParticipant
from fhir.resources.R4B.reference import Reference

from ..constants.code_systems import APPOINTMENT_DOCUMENT_SYSTEM, APPOINTMENT_TYPE_SYSTEM
from ..upstream import AppointmentItem, AppointmentPerson, AppointmentsResponse, PlaceDetailed
from ..utils.exceptions import SkippedRecord
from ..utils.text import blank_to_none, join_present
from .common import concept, cpr_reference, display_reference, identifier, map_each
from .dates import Boundary, normalize_or_none
from .identity import derive_id


def map_appointment(item: AppointmentItem) -> Optional[Appointment]:
    """
    Create FHIR Appointment for one upstream appointment.

    Raises:
        SkippedRecord: when the appointment has no participant at all
    """
    appointment_type = blank_to_none(item.appointment_type)
    title = blank_to_none(item.title)
    if appointment_type is None and title is None:
        return None

    participants = [
        AppointmentParticipant(actor=actor, status="accepted")
        for actor in (
            _patient_actor(item.patient),
            _place_actor(item.performer),
            _place_actor(item.location),
        )
        if actor is not None
    ]
    if not participants:
        raise SkippedRecord("appointment has no participants", "appointment")

    document_id = blank_to_none(item.document_id)
    ident = identifier(APPOINTMENT_DOCUMENT_SYSTEM, document_id)

    end = None
    if not item.end_time_not_defined:
        end = normalize_or_none(item.end_time, Boundary.END, "endTime")

    return Appointment(
        id=derive_id("apt", document_id),
        identifier=[ident] if ident else None,
        status="booked",
        serviceType=[concept(APPOINTMENT_TYPE_SYSTEM, appointment_type, text=title)],
        description=title,
        start=normalize_or_none(item.start_time, Boundary.START, "startTime"),
        end=end,
        participant=participants,
    )


def _patient_actor(person: Optional[AppointmentPerson]) -> Optional[Reference]:
    if person is None:
        return None
    display = join_present([person.given_name, person.family_name]) or None
    if blank_to_none(person.person_identifier) is None:
        return display_reference(display)
    return cpr_reference(person.person_identifier, display)


def _place_actor(place: Optional[PlaceDetailed]) -> Optional[Reference]:
    if place is None:
        return None
    formatted = place.address.formatted if place.address else None
    return display_reference(join_present([place.organisation, formatted], " - "))


def map_appointments(payload: Optional[AppointmentsResponse]) -> List[Appointment]:
    if payload is None:
        return []
    return map_each(payload.appointments, map_appointment, "appointment")
