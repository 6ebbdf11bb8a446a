# ============================================================================
# src/clinical_bridge/upstream/appointments.py
# ============================================================================
"""
Appointments (aftaler)
"""

from typing import List, Optional

from .base import UpstreamModel

class AddressDetailed(UpstreamModel):
    street: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    formatted: Optional[str] = None


class PlaceDetailed(UpstreamModel):
    """Performer or location of an appointment; both share one shape."""
    organisation: Optional[str] = None
    address: Optional[AddressDetailed] = None
    unit_type: Optional[str] = None
    ward: Optional[str] = None
    phone: Optional[str] = None
    sor_id: Optional[str] = None


class AppointmentPerson(UpstreamModel):
    address: Optional[str] = None
    family_name: Optional[str] = None
    given_name: Optional[str] = None
    person_identifier: Optional[str] = None


class AppointmentItem(UpstreamModel):
    appointment_type: Optional[str] = None
    document_id: Optional[str] = None
    title: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    end_time_not_defined: Optional[bool] = None
    location: Optional[PlaceDetailed] = None
    patient: Optional[AppointmentPerson] = None
    performer: Optional[PlaceDetailed] = None


class AppointmentsResponse(UpstreamModel):
    appointments: List[AppointmentItem] = []
    error_text: Optional[str] = None
