"""Initial user directory schema

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610180001"
down_revision = None
branch_labels = None
depends_on = None

user_level_enum = sa.Enum(
    "TRAINEE",
    "JUNIOR",
    "MIDDLE",
    "SENIOR",
    "LEAD",
    name="user_level",
)

user_department_role_enum = sa.Enum(
    "developer",
    "manager",
    "headOfDepartment",
    "techLead",
    "admin",
    name="user_department_role",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("first_name", sa.String(length=128), nullable=True),
        sa.Column("last_name", sa.String(length=128), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("level", user_level_enum, nullable=False, server_default="TRAINEE"),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "need_congratulate", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "user_departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "department_id",
            sa.Integer(),
            sa.ForeignKey("departments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role", user_department_role_enum, nullable=False, server_default="developer"
        ),
        sa.UniqueConstraint("user_id", "department_id", name="uq_user_department"),
    )
    op.create_index("ix_user_departments_user_id", "user_departments", ["user_id"])
    op.create_index("ix_user_departments_department_id", "user_departments", ["department_id"])

    op.create_table(
        "specializations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
    )

    op.create_table(
        "competencies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "specialization_id",
            sa.Integer(),
            sa.ForeignKey("specializations.id", ondelete="RESTRICT"),
            nullable=False,
        ),
    )

    op.create_table(
        "user_competencies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "competence_id",
            sa.Integer(),
            sa.ForeignKey("competencies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_user_competencies_user_id", "user_competencies", ["user_id"])
    op.create_index("ix_user_competencies_updated_at", "user_competencies", ["updated_at"])

    op.create_table(
        "user_unavailability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
    )
    op.create_index("ix_user_unavailability_user_id", "user_unavailability", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_unavailability_user_id", "user_unavailability")
    op.drop_table("user_unavailability")
    op.drop_index("ix_user_competencies_updated_at", "user_competencies")
    op.drop_index("ix_user_competencies_user_id", "user_competencies")
    op.drop_table("user_competencies")
    op.drop_table("competencies")
    op.drop_table("specializations")
    op.drop_index("ix_user_departments_department_id", "user_departments")
    op.drop_index("ix_user_departments_user_id", "user_departments")
    op.drop_table("user_departments")
    op.drop_table("departments")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
    user_department_role_enum.drop(op.get_bind(), checkfirst=True)
    user_level_enum.drop(op.get_bind(), checkfirst=True)
