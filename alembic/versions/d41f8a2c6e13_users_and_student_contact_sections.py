"""users and student contact sections

Revision ID: d41f8a2c6e13
Revises: b7c1e0a94d21
Create Date: 2026-10-17 09:00:00.000000

This migration:
1. Creates the users principal table and its invitation table
2. Creates the students_sponsor and students_emergency sections (one per student)
3. Creates students_guardians (many per student)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "d41f8a2c6e13"
down_revision: str | Sequence[str] | None = "b7c1e0a94d21"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


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


def _student_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["student_id"],
        ["students.id"],
        name=f"fk_{table}_student_id",
        ondelete="CASCADE",
    )


def upgrade() -> None:
    """Create the users tables and the student contact sections."""
    # Users
    op.create_table(
        "users",
        *_audit_columns(),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("activated", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("first_time_login", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "users_invitations",
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("expiry", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("token"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_users_invitations_user_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_users_invitations_user_id"), "users_invitations", ["user_id"], unique=False
    )

    # Student contact sections
    op.create_table(
        "students_sponsor",
        *_audit_columns(),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sponsorship_type", sa.String(length=50), nullable=False),
        sa.Column("sponsorship_nature", sa.String(length=50), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("contact_person_name", sa.String(length=255), nullable=True),
        sa.Column("contact_person_phone", sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _student_fk("students_sponsor"),
        sa.UniqueConstraint("student_id", name="uq_students_sponsor_student_id"),
    )

    op.create_table(
        "students_emergency",
        *_audit_columns(),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("id_number", sa.String(length=20), nullable=False),
        sa.Column("relationship", sa.String(length=50), nullable=False),
        sa.Column("residence", sa.String(length=255), nullable=False),
        sa.Column("town", sa.String(length=100), nullable=True),
        sa.Column("occupation", sa.String(length=100), nullable=True),
        sa.Column("work_place", sa.String(length=255), nullable=True),
        sa.Column("work_phone", sa.String(length=20), nullable=True),
        sa.Column("provided_by", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _student_fk("students_emergency"),
        sa.UniqueConstraint("student_id", name="uq_students_emergency_student_id"),
    )

    op.create_table(
        "students_guardians",
        *_audit_columns(),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=20), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("phone_alternate", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("id_number", sa.String(length=20), nullable=False),
        sa.Column("kra_pin_no", sa.String(length=20), nullable=True),
        sa.Column("passport_no", sa.String(length=20), nullable=True),
        sa.Column("alien_no", sa.String(length=20), nullable=True),
        sa.Column("relationship", sa.String(length=50), nullable=False),
        sa.Column("occupation", sa.String(length=100), nullable=True),
        sa.Column("work_location", sa.String(length=255), nullable=True),
        sa.Column("work_phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("residence", sa.String(length=255), nullable=False),
        sa.Column("town", sa.String(length=100), nullable=False),
        sa.Column("county", sa.String(length=100), nullable=False),
        sa.Column("sub_county", sa.String(length=100), nullable=False),
        sa.Column("ward", sa.String(length=100), nullable=True),
        sa.Column("voters_card_no", sa.String(length=20), nullable=True),
        sa.Column("polling_station", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _student_fk("students_guardians"),
    )
    op.create_index(
        op.f("ix_students_guardians_student_id"),
        "students_guardians",
        ["student_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop the tables created by this revision."""
    op.drop_index(op.f("ix_students_guardians_student_id"), table_name="students_guardians")
    op.drop_table("students_guardians")
    op.drop_table("students_emergency")
    op.drop_table("students_sponsor")

    op.drop_index(op.f("ix_users_invitations_user_id"), table_name="users_invitations")
    op.drop_table("users_invitations")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
