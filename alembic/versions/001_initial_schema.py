"""Initial schema: users, profile sections, applications, resumes, cover letters.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_SECTION_TABLES = [
    "work_experiences",
    "education",
    "skills",
    "projects",
    "certifications",
    "achievements",
    "profile_references",
]

application_status = sa.Enum(
    "applied", "interviewing", "offer", "rejected", "withdrawn", name="applicationstatus"
)


def _user_fk() -> sa.Column:
    return sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def _section_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk(),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), default=""),
        sa.Column("is_active", sa.Boolean(), default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("linkedin_url", sa.String(500), nullable=True),
        sa.Column("github_url", sa.String(500), nullable=True),
        sa.Column("portfolio_url", sa.String(500), nullable=True),
        sa.Column("professional_summary", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "work_experiences",
        *_section_columns(),
        sa.Column("job_title", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("start_date", sa.String(7), nullable=False),
        sa.Column("end_date", sa.String(7), nullable=True),
        sa.Column("is_current", sa.Boolean(), default=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("technologies", sa.Text(), nullable=True),
    )
    op.create_table(
        "education",
        *_section_columns(),
        sa.Column("degree", sa.String(255), nullable=False),
        sa.Column("field_of_study", sa.String(255), nullable=True),
        sa.Column("institution", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("start_date", sa.String(7), nullable=True),
        sa.Column("end_date", sa.String(7), nullable=True),
        sa.Column("gpa", sa.String(20), nullable=True),
        sa.Column("honors", sa.String(255), nullable=True),
        sa.Column("relevant_coursework", sa.Text(), nullable=True),
    )
    op.create_table(
        "skills",
        *_section_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("proficiency_level", sa.String(20), nullable=True),
        sa.Column("years_of_experience", sa.Integer(), nullable=True),
    )
    op.create_table(
        "projects",
        *_section_columns(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("technologies", sa.Text(), nullable=True),
        sa.Column("project_url", sa.String(500), nullable=True),
        sa.Column("github_url", sa.String(500), nullable=True),
        sa.Column("start_date", sa.String(7), nullable=True),
        sa.Column("end_date", sa.String(7), nullable=True),
        sa.Column("is_ongoing", sa.Boolean(), default=False),
    )
    op.create_table(
        "certifications",
        *_section_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("issuing_organization", sa.String(255), nullable=False),
        sa.Column("issue_date", sa.String(7), nullable=True),
        sa.Column("expiration_date", sa.String(7), nullable=True),
        sa.Column("credential_id", sa.String(255), nullable=True),
        sa.Column("credential_url", sa.String(500), nullable=True),
    )
    op.create_table(
        "achievements",
        *_section_columns(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("organization", sa.String(255), nullable=True),
        sa.Column("date", sa.String(7), nullable=True),
        sa.Column("url", sa.String(500), nullable=True),
    )
    op.create_table(
        "profile_references",
        *_section_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("relationship", sa.String(20), nullable=True),
    )
    for table in _SECTION_TABLES:
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "job_applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("position", sa.String(255), nullable=False),
        sa.Column("job_description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("job_url", sa.String(500), nullable=True),
        sa.Column("salary_range", sa.String(100), nullable=True),
        sa.Column("status", application_status, nullable=False, server_default="applied"),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_name", sa.String(255), nullable=True),
        sa.Column("recruiter_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_applications_user_created", "job_applications", ["user_id", "created_at"])
    op.create_index("idx_applications_user_status", "job_applications", ["user_id", "status"])

    op.create_table(
        "resumes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_tailored", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "job_application_id",
            UUID(as_uuid=True),
            sa.ForeignKey("job_applications.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_resumes_user_updated", "resumes", ["user_id", "updated_at"])
    op.create_index("ix_resumes_job_application_id", "resumes", ["job_application_id"])

    op.create_table(
        "cover_letters",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column(
            "job_application_id",
            UUID(as_uuid=True),
            sa.ForeignKey("job_applications.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "resume_id",
            UUID(as_uuid=True),
            sa.ForeignKey("resumes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_ai_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_cover_letters_user_created", "cover_letters", ["user_id", "created_at"])
    op.create_index("ix_cover_letters_job_application_id", "cover_letters", ["job_application_id"])


def downgrade() -> None:
    op.drop_table("cover_letters")
    op.drop_table("resumes")
    op.drop_table("job_applications")
    application_status.drop(op.get_bind(), checkfirst=True)
    for table in reversed(_SECTION_TABLES):
        op.drop_table(table)
    op.drop_table("user_profiles")
    op.drop_table("users")
