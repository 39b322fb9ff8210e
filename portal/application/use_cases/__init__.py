"""Application use cases: one entry point per workflow."""

from portal.application.use_cases.appointments import AppointmentLifecycle
from portal.application.use_cases.requests import RequestWorkflow

__all__ = [
    "AppointmentLifecycle",
    "RequestWorkflow",
]
