"""A seeded two-office portal backed by the in-memory repositories.

Office A has services svc_a (staff_a assigned) and svc_a2 (nobody assigned);
office B has svc_b (staff_b assigned). Every staff and manager user holds a
staff membership in their office.
"""

from dataclasses import dataclass

from portal.application.dtos.office import OfficeResult, ServiceResult, StaffResult
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.availability_service import AvailabilityService
from portal.application.services.feedback_service import FeedbackService
from portal.application.services.office_service import OfficeService
from portal.application.services.role_service import RoleService
from portal.application.services.scoping_service import ScopingService
from portal.application.services.staff_service import StaffService
from portal.application.use_cases import AppointmentLifecycle, RequestWorkflow
from portal.domain.enums import OfficeStatus
from tests.fakes import (
    FakeAppointmentRepository,
    FakeAvailabilityRepository,
    FakeFeedbackRepository,
    FakeGrantResolver,
    FakeOfficeRepository,
    FakeOutbox,
    FakePermissionRepository,
    FakeRequestRepository,
    FakeRolePermissionRepository,
    FakeRoleRepository,
    FakeScopeRepository,
    FakeServiceRepository,
    FakeStaffRepository,
    FakeUser,
    FakeUserRepository,
    Store,
)


@dataclass
class World:
    store: Store
    role_ids: dict[str, str]
    resolver: FakeGrantResolver
    guard: AuthorizationService
    scoping: ScopingService
    outbox: FakeOutbox
    workflow: RequestWorkflow
    lifecycle: AppointmentLifecycle
    offices: OfficeService
    roles: RoleService
    staff: StaffService
    availability: AvailabilityService
    feedback: FeedbackService

    def add_user(
        self,
        user_id: str,
        role: str | None,
        office_id: str | None = None,
        is_active: bool = True,
    ) -> FakeUser:
        user = FakeUser(
            id=user_id,
            phone_number=f"+2519{len(self.store.users):08d}",
            role_id=self.role_ids[role] if role else None,
            is_active=is_active,
            username=user_id,
        )
        self.store.users[user_id] = user
        if office_id is not None:
            self.store.staff[f"st_{user_id}"] = StaffResult(f"st_{user_id}", user_id, office_id)
        return user


def build_world() -> World:
    store = Store()
    role_ids = store.seed_rbac()
    for office_id in ("office_a", "office_b"):
        store.offices[office_id] = OfficeResult(
            office_id, office_id.replace("_", " ").title(), None, None, OfficeStatus.ACTIVE
        )
    store.services["svc_a"] = ServiceResult("svc_a", "office_a", "Birth certificate", None)
    store.services["svc_a2"] = ServiceResult("svc_a2", "office_a", "ID renewal", None)
    store.services["svc_b"] = ServiceResult("svc_b", "office_b", "Business licence", None)

    resolver = FakeGrantResolver(store)
    guard = AuthorizationService(resolver)
    scoping = ScopingService(FakeScopeRepository(store))
    outbox = FakeOutbox(store)
    request_repo = FakeRequestRepository(store)
    service_repo = FakeServiceRepository(store)
    staff_repo = FakeStaffRepository(store)
    user_repo = FakeUserRepository(store)
    role_repo = FakeRoleRepository(store)
    role_permission_repo = FakeRolePermissionRepository(store)
    office_repo = FakeOfficeRepository(store)
    appointment_repo = FakeAppointmentRepository(store)
    offices = OfficeService(guard, scoping, office_repo, service_repo, staff_repo)

    world = World(
        store=store,
        role_ids=role_ids,
        resolver=resolver,
        guard=guard,
        scoping=scoping,
        outbox=outbox,
        workflow=RequestWorkflow(guard, scoping, request_repo, service_repo, outbox),
        lifecycle=AppointmentLifecycle(
            guard, scoping, appointment_repo, request_repo, staff_repo, outbox
        ),
        offices=offices,
        roles=RoleService(
            guard,
            scoping,
            role_repo,
            FakePermissionRepository(store),
            role_permission_repo,
            user_repo,
        ),
        staff=StaffService(
            guard, scoping, staff_repo, user_repo, role_repo, role_permission_repo, office_repo
        ),
        availability=AvailabilityService(
            guard, scoping, offices, FakeAvailabilityRepository(store), appointment_repo
        ),
        feedback=FeedbackService(guard, scoping, request_repo, FakeFeedbackRepository(store)),
    )
    world.add_user("admin", "admin")
    world.add_user("manager_a", "manager", "office_a")
    world.add_user("staff_a", "staff", "office_a")
    world.add_user("staff_a_other", "staff", "office_a")
    world.add_user("manager_b", "manager", "office_b")
    world.add_user("staff_b", "staff", "office_b")
    world.add_user("citizen", "customer")
    world.add_user("citizen2", "customer")
    world.add_user("roleless", None)
    world.add_user("disabled", "staff", is_active=False)
    store.assignments.add(("svc_a", "st_staff_a"))
    store.assignments.add(("svc_b", "st_staff_b"))
    return world
