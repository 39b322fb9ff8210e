"""Ports (Protocols) implemented by infrastructure."""

from portal.application.interfaces.repositories import (
    IAppointmentRepository,
    IGrantResolver,
    INotificationOutbox,
    IOfficeRepository,
    IOutboxStore,
    IPermissionRepository,
    IRequestRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IScopeRepository,
    IServiceRepository,
    IStaffRepository,
    IUserRepository,
)
from portal.application.interfaces.services import INotificationDispatcher, IOutboxSignal

__all__ = [
    "IAppointmentRepository",
    "IGrantResolver",
    "INotificationDispatcher",
    "INotificationOutbox",
    "IOfficeRepository",
    "IOutboxSignal",
    "IOutboxStore",
    "IPermissionRepository",
    "IRequestRepository",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IScopeRepository",
    "IServiceRepository",
    "IStaffRepository",
    "IUserRepository",
]
