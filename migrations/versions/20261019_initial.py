"""esquema inicial: catálogo, inscripciones, certificados, plantillas y ajustes

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "20261019_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def _enum() -> sa.String:
    # los Enum del modelo usan native_enum=False: VARCHAR(20) en todos los motores
    return sa.String(length=20)

def _ts(name: str, **kw) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), **kw)

def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=160), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", _enum(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_admin_users"),
    )
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("document_type", _enum(), nullable=False),
        sa.Column("document_number", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=160), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=80), nullable=True),
        sa.Column("province", sa.String(length=80), nullable=True),
        sa.Column("district", sa.String(length=80), nullable=True),
        sa.Column("occupation", sa.String(length=120), nullable=True),
        sa.Column("workplace", sa.String(length=160), nullable=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        _ts("updated_at", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_participants"),
    )
    op.create_index("ix_participants_document_number", "participants", ["document_number"], unique=True)
    op.create_index("ix_participants_email", "participants", ["email"], unique=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("slug", sa.String(length=140), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=60), nullable=True),
        sa.Column("color", sa.String(length=40), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=220), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("short_description", sa.String(length=300), nullable=True),
        sa.Column("type", _enum(), nullable=False),
        sa.Column("modality", _enum(), nullable=False),
        sa.Column("academic_hours", sa.Integer(), nullable=False),
        sa.Column("chronological_hours", sa.Integer(), nullable=True),
        sa.Column("credits", sa.Integer(), nullable=True),
        sa.Column("syllabus", sa.JSON(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("image", sa.String(length=255), nullable=True),
        sa.Column("max_capacity", sa.Integer(), nullable=True),
        _ts("start_date", nullable=True),
        _ts("end_date", nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        _ts("updated_at", nullable=True),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], name="fk_courses_category_id_categories"),
        sa.PrimaryKeyConstraint("id", name="pk_courses"),
    )
    op.create_index("ix_courses_slug", "courses", ["slug"], unique=True)

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("status", _enum(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("observations", sa.Text(), nullable=True),
        _ts("enrolled_at", server_default=sa.func.now(), nullable=False),
        _ts("paid_at", nullable=True),
        _ts("updated_at", nullable=True),
        sa.ForeignKeyConstraint(["participant_id"], ["participants.id"], name="fk_enrollments_participant_id_participants"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], name="fk_enrollments_course_id_courses"),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.UniqueConstraint("participant_id", "course_id", name="uq_enrollment_participant_course"),
    )
    op.create_index("ix_enrollments_participant_id", "enrollments", ["participant_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "certificates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("verification_code", sa.String(length=64), nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=True),
        sa.Column("enrollment_id", sa.Integer(), nullable=True),
        sa.Column("issued_by_id", sa.Integer(), nullable=True),
        sa.Column("course_name", sa.String(length=200), nullable=False),
        sa.Column("course_type", _enum(), nullable=False),
        sa.Column("modality", _enum(), nullable=False),
        sa.Column("academic_hours", sa.Integer(), nullable=False),
        sa.Column("chronological_hours", sa.Integer(), nullable=True),
        sa.Column("credits", sa.Integer(), nullable=True),
        sa.Column("syllabus", sa.JSON(), nullable=False),
        sa.Column("institution_name", sa.String(length=200), nullable=False),
        sa.Column("institution_ruc", sa.String(length=20), nullable=True),
        sa.Column("institution_address", sa.String(length=255), nullable=True),
        sa.Column("signatories", sa.JSON(), nullable=False),
        _ts("start_date", nullable=True),
        _ts("end_date", nullable=True),
        _ts("issued_at", nullable=False),
        sa.Column("grade", sa.Numeric(5, 2), nullable=True),
        sa.Column("grade_text", sa.String(length=60), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("state", _enum(), nullable=False),
        sa.Column("verification_url", sa.String(length=255), nullable=False),
        _ts("updated_at", nullable=True),
        sa.ForeignKeyConstraint(["participant_id"], ["participants.id"], name="fk_certificates_participant_id_participants"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], name="fk_certificates_course_id_courses", ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["enrollment_id"], ["enrollments.id"], name="fk_certificates_enrollment_id_enrollments", ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["issued_by_id"], ["admin_users.id"], name="fk_certificates_issued_by_id_admin_users"),
        sa.PrimaryKeyConstraint("id", name="pk_certificates"),
    )
    op.create_index("ix_certificates_verification_code", "certificates", ["verification_code"], unique=True)
    op.create_index("ix_certificates_participant_id", "certificates", ["participant_id"])
    op.create_index("ix_certificates_course_id", "certificates", ["course_id"])
    op.create_index("ix_certificates_enrollment_id", "certificates", ["enrollment_id"])
    # índice parcial: un solo EMITIDO por (participante, curso)
    op.create_index(
        "uq_certificates_issued_pair", "certificates", ["participant_id", "course_id"],
        unique=True,
        sqlite_where=sa.text("state = 'EMITIDO'"),
        postgresql_where=sa.text("state = 'EMITIDO'"),
    )

    op.create_table(
        "certificate_templates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("course_type", _enum(), nullable=False),
        sa.Column("orientation", _enum(), nullable=False),
        sa.Column("background_url", sa.String(length=255), nullable=True),
        sa.Column("background_color", sa.String(length=20), nullable=True),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=True),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        _ts("updated_at", nullable=True),
        sa.ForeignKeyConstraint(["creator_id"], ["admin_users.id"], name="fk_certificate_templates_creator_id_admin_users"),
        sa.PrimaryKeyConstraint("id", name="pk_certificate_templates"),
    )
    op.create_index("ix_certificate_templates_course_type", "certificate_templates", ["course_type"])

    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("key", sa.String(length=80), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_settings"),
    )
    op.create_index("ix_settings_key", "settings", ["key"], unique=True)

    op.create_table(
        "course_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("requested_course", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("name", sa.String(length=160), nullable=True),
        sa.Column("email", sa.String(length=160), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("state", _enum(), nullable=False),
        _ts("created_at", server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_course_requests"),
    )

def downgrade() -> None:
    op.drop_table("course_requests")
    op.drop_index("ix_settings_key", table_name="settings")
    op.drop_table("settings")
    op.drop_index("ix_certificate_templates_course_type", table_name="certificate_templates")
    op.drop_table("certificate_templates")
    op.drop_index("uq_certificates_issued_pair", table_name="certificates")
    op.drop_index("ix_certificates_enrollment_id", table_name="certificates")
    op.drop_index("ix_certificates_course_id", table_name="certificates")
    op.drop_index("ix_certificates_participant_id", table_name="certificates")
    op.drop_index("ix_certificates_verification_code", table_name="certificates")
    op.drop_table("certificates")
    op.drop_index("ix_enrollments_course_id", table_name="enrollments")
    op.drop_index("ix_enrollments_participant_id", table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_index("ix_courses_slug", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_categories_slug", table_name="categories")
    op.drop_table("categories")
    op.drop_index("ix_participants_email", table_name="participants")
    op.drop_index("ix_participants_document_number", table_name="participants")
    op.drop_table("participants")
    op.drop_index("ix_admin_users_email", table_name="admin_users")
    op.drop_table("admin_users")
