"""Appointment use cases."""

from portal.application.use_cases.appointments.appointment_lifecycle import AppointmentLifecycle

__all__ = ["AppointmentLifecycle"]
