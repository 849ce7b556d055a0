"""initial schema and seed roles

Revision ID: b7c1e0a94d21
Revises:
Create Date: 2026-09-28 10:00:00.000000

This migration:
1. Creates the roles table and seeds the six fixed roles
2. Creates admin and student principal tables with their invitation tables
3. Creates the student profile sections
4. Creates bursaries and applications with their enum types

Roles are created first because both principal tables reference them.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

from bursary.modules.roles.models import SEED_ROLES

# revision identifiers, used by Alembic.
revision: str = "b7c1e0a94d21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ALLOCATION_TYPES = ("fixed", "variable")
APPLICATION_STAGES = ("submitted", "county", "ministry", "finance", "disbursed")


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
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


def _principal_columns() -> list[sa.Column]:
    return [
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("activated", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("first_time_login", sa.Boolean(), nullable=False, server_default="true"),
    ]


def upgrade() -> None:
    """Create every table and seed roles."""
    bind = op.get_bind()

    allocation_type_enum = postgresql.ENUM(
        *ALLOCATION_TYPES, name="allocation_type", create_type=False
    )
    application_stage_enum = postgresql.ENUM(
        *APPLICATION_STAGES, name="application_stage", create_type=False
    )
    allocation_type_enum.create(bind, checkfirst=True)
    application_stage_enum.create(bind, checkfirst=True)

    # Roles
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )
    op.bulk_insert(roles, list(SEED_ROLES))
    # Explicit IDs were inserted; move the sequence past them
    op.execute("SELECT setval(pg_get_serial_sequence('roles', 'id'), (SELECT MAX(id) FROM roles))")

    # Admins
    op.create_table(
        "system_users",
        *_audit_columns(),
        *_principal_columns(),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("role_code", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["role_id"], ["roles.id"], name="fk_system_users_role_id", ondelete="RESTRICT"
        ),
    )
    op.create_index(op.f("ix_system_users_email"), "system_users", ["email"], unique=True)
    op.create_index(op.f("ix_system_users_role_id"), "system_users", ["role_id"], unique=False)

    op.create_table(
        "admins_invitations",
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("admin_id", sa.Uuid(), nullable=False),
        sa.Column("expiry", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("token"),
        sa.ForeignKeyConstraint(
            ["admin_id"],
            ["system_users.id"],
            name="fk_admins_invitations_admin_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_admins_invitations_admin_id"), "admins_invitations", ["admin_id"], unique=False
    )

    # Students
    op.create_table(
        "students",
        *_audit_columns(),
        *_principal_columns(),
        sa.Column("role_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["role_id"], ["roles.id"], name="fk_students_role_id", ondelete="SET NULL"
        ),
    )
    op.create_index(op.f("ix_students_email"), "students", ["email"], unique=True)

    op.create_table(
        "students_invitations",
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("expiry", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("token"),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_students_invitations_student_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_students_invitations_student_id"),
        "students_invitations",
        ["student_id"],
        unique=False,
    )

    # Student profile sections
    op.create_table(
        "students_personal",
        *_audit_columns(),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(length=20), nullable=False),
        sa.Column("citizenship", sa.String(length=100), nullable=False),
        sa.Column("parental_status", sa.String(length=50), nullable=False),
        sa.Column("birth_cert_no", sa.String(length=50), nullable=False),
        sa.Column("birth_county", sa.String(length=100), nullable=False),
        sa.Column("birth_sub_county", sa.String(length=100), nullable=False),
        sa.Column("ward", sa.String(length=100), nullable=False),
        sa.Column("residence", sa.String(length=255), nullable=False),
        sa.Column("id_number", sa.String(length=20), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("special_need", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("special_needs_type", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_students_personal_student_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("student_id", name="uq_students_personal_student_id"),
    )

    op.create_table(
        "students_institution",
        *_audit_columns(),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("institution_name", sa.String(length=255), nullable=False),
        sa.Column("institution_type", sa.String(length=50), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("telephone", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("county", sa.String(length=100), nullable=False),
        sa.Column("sub_county", sa.String(length=100), nullable=False),
        sa.Column("ward", sa.String(length=100), nullable=True),
        sa.Column("principal_name", sa.String(length=255), nullable=False),
        sa.Column("year_joined", sa.Integer(), nullable=False),
        sa.Column("current_class_level", sa.String(length=50), nullable=False),
        sa.Column("admission_number", sa.String(length=50), nullable=False),
        sa.Column("bank_name", sa.String(length=100), nullable=False),
        sa.Column("bank_branch", sa.String(length=100), nullable=False),
        sa.Column("bank_account_name", sa.String(length=255), nullable=False),
        sa.Column("bank_account_no", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_students_institution_student_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("student_id", name="uq_students_institution_student_id"),
    )

    # Bursaries
    op.create_table(
        "bursaries",
        *_audit_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("amount_allocated", sa.Numeric(14, 2), nullable=True),
        sa.Column("amount_per_student", sa.Numeric(14, 2), nullable=True),
        sa.Column("allocation_type", allocation_type_enum, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bursaries_created_at", "bursaries", ["created_at"], unique=False)

    # Applications
    op.create_table(
        "applications",
        *_audit_columns(),
        sa.Column("bursary_id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column(
            "stage",
            application_stage_enum,
            nullable=False,
            server_default="submitted",
        ),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("soft_delete", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["bursary_id"],
            ["bursaries.id"],
            name="fk_applications_bursary_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_applications_student_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_applications_stage_soft_delete",
        "applications",
        ["stage", "soft_delete"],
        unique=False,
    )
    op.create_index(
        "ix_applications_student_bursary",
        "applications",
        ["student_id", "bursary_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop every table and enum type."""
    op.drop_index("ix_applications_student_bursary", table_name="applications")
    op.drop_index("ix_applications_stage_soft_delete", table_name="applications")
    op.drop_table("applications")

    op.drop_index("ix_bursaries_created_at", table_name="bursaries")
    op.drop_table("bursaries")

    op.drop_table("students_institution")
    op.drop_table("students_personal")

    op.drop_index(op.f("ix_students_invitations_student_id"), table_name="students_invitations")
    op.drop_table("students_invitations")
    op.drop_index(op.f("ix_students_email"), table_name="students")
    op.drop_table("students")

    op.drop_index(op.f("ix_admins_invitations_admin_id"), table_name="admins_invitations")
    op.drop_table("admins_invitations")
    op.drop_index(op.f("ix_system_users_role_id"), table_name="system_users")
    op.drop_index(op.f("ix_system_users_email"), table_name="system_users")
    op.drop_table("system_users")

    op.drop_table("roles")

    bind = op.get_bind()
    postgresql.ENUM(*APPLICATION_STAGES, name="application_stage").drop(bind, checkfirst=True)
    postgresql.ENUM(*ALLOCATION_TYPES, name="allocation_type").drop(bind, checkfirst=True)
