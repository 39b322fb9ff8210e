"""initial_schema offices, rbac, users, staff, requests, appointments, outbox

Revision ID: 3f1c2a9b7d40
Revises:
Create Date: 2026-10-18 09:12:41.204117

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - create all portal tables."""

    op.create_table(
        "office",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'active'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="ck_office_status"),
    )

    op.create_table(
        "role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("office_id", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["office_id"], ["office.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "kind IN ('admin', 'manager', 'staff', 'customer', 'custom')",
            name="ck_role_kind",
        ),
    )
    op.create_index("ix_role_office_id", "role", ["office_id"])
    # Case-insensitive name, unique per office; NULL office means platform-wide
    op.create_index(
        "uq_role_name_office",
        "role",
        [sa.text("lower(name)"), sa.text("coalesce(office_id, '')")],
        unique=True,
    )

    op.create_table(
        "permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("resource", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("permission_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["permission_id"], ["permission.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )
    op.create_index("ix_role_permission_role_id", "role_permission", ["role_id"])
    op.create_index("ix_role_permission_permission_id", "role_permission", ["permission_id"])

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("role_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("phone_number"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_app_user_role_id", "app_user", ["role_id"])

    op.create_table(
        "staff",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("office_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["office_id"], ["office.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_staff_user_id", "staff", ["user_id"])
    op.create_index("ix_staff_office_id", "staff", ["office_id"])

    op.create_table(
        "service",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("office_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["office_id"], ["office.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_service_office_id", "service", ["office_id"])

    op.create_table(
        "service_staff_assignment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), nullable=False),
        sa.Column("staff_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["service_id"], ["service.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("service_id", "staff_id", name="uq_service_staff"),
    )
    op.create_index(
        "ix_service_staff_assignment_service_id", "service_staff_assignment", ["service_id"]
    )
    op.create_index(
        "ix_service_staff_assignment_staff_id", "service_staff_assignment", ["staff_id"]
    )

    op.create_table(
        "service_request",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), nullable=False),
        sa.Column("current_address", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status_by_staff", sa.String(), nullable=False, server_default=sa.text("'pending'")
        ),
        sa.Column("approving_staff_id", sa.String(), nullable=True),
        sa.Column(
            "status_by_manager", sa.String(), nullable=False, server_default=sa.text("'pending'")
        ),
        sa.Column("approving_manager_id", sa.String(), nullable=True),
        sa.Column("approve_note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["service.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["approving_staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["approving_manager_id"], ["staff.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status_by_staff IN ('pending', 'approved', 'rejected')",
            name="ck_request_status_by_staff",
        ),
        sa.CheckConstraint(
            "status_by_manager IN ('pending', 'approved', 'rejected')",
            name="ck_request_status_by_manager",
        ),
    )
    op.create_index("ix_service_request_user_id", "service_request", ["user_id"])
    op.create_index("ix_service_request_service_id", "service_request", ["service_id"])

    op.create_table(
        "appointment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("request_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("staff_id", sa.String(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["request_id"], ["service_request.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'cancelled', 'completed')",
            name="ck_appointment_status",
        ),
    )
    op.create_index("ix_appointment_request_id", "appointment", ["request_id"])
    op.create_index("ix_appointment_user_id", "appointment", ["user_id"])
    # At most one active appointment per request
    op.create_index(
        "uq_appointment_active_per_request",
        "appointment",
        ["request_id"],
        unique=True,
        postgresql_where=sa.text("status NOT IN ('rejected', 'cancelled')"),
    )

    op.create_table(
        "notification_outbox",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("destination", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("topic", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'sent', 'failed')", name="ck_notification_status"
        ),
    )
    op.create_index(
        "ix_notification_outbox_status_created", "notification_outbox", ["status", "created_at"]
    )


def downgrade() -> None:
    """Downgrade schema - drop all portal tables."""
    op.drop_index("ix_notification_outbox_status_created", table_name="notification_outbox")
    op.drop_table("notification_outbox")
    op.drop_index("uq_appointment_active_per_request", table_name="appointment")
    op.drop_index("ix_appointment_user_id", table_name="appointment")
    op.drop_index("ix_appointment_request_id", table_name="appointment")
    op.drop_table("appointment")
    op.drop_index("ix_service_request_service_id", table_name="service_request")
    op.drop_index("ix_service_request_user_id", table_name="service_request")
    op.drop_table("service_request")
    op.drop_index("ix_service_staff_assignment_staff_id", table_name="service_staff_assignment")
    op.drop_index(
        "ix_service_staff_assignment_service_id", table_name="service_staff_assignment"
    )
    op.drop_table("service_staff_assignment")
    op.drop_index("ix_service_office_id", table_name="service")
    op.drop_table("service")
    op.drop_index("ix_staff_office_id", table_name="staff")
    op.drop_index("ix_staff_user_id", table_name="staff")
    op.drop_table("staff")
    op.drop_index("ix_app_user_role_id", table_name="app_user")
    op.drop_table("app_user")
    op.drop_index("ix_role_permission_permission_id", table_name="role_permission")
    op.drop_index("ix_role_permission_role_id", table_name="role_permission")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_index("uq_role_name_office", table_name="role")
    op.drop_index("ix_role_office_id", table_name="role")
    op.drop_table("role")
    op.drop_table("office")
