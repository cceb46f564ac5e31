"""create directory and timetable period tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

day_of_week = sa.Enum(
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    name="day_of_week",
)


def upgrade() -> None:
    op.create_table(
        "academic_terms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_academic_terms_name", "academic_terms", ["name"], unique=True)

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)

    op.create_table(
        "class_sections",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("grade_level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_class_sections_name", "class_sections", ["name"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)

    op.create_table(
        "timetable_periods",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("academic_term_id", sa.String(length=36), nullable=False),
        sa.Column("day_of_week", day_of_week, nullable=False),
        sa.Column("start_minute", sa.Integer(), nullable=False),
        sa.Column("end_minute", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timetable_periods_academic_term_id", "timetable_periods", ["academic_term_id"])
    op.create_index(
        "ix_timetable_periods_teacher_term_day",
        "timetable_periods",
        ["teacher_id", "academic_term_id", "day_of_week"],
    )

    op.create_table(
        "timetable_period_classes",
        sa.Column("period_id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("class_section_id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_timetable_period_classes_class", "timetable_period_classes", ["class_section_id"])


def downgrade() -> None:
    op.drop_index("ix_timetable_period_classes_class", table_name="timetable_period_classes")
    op.drop_table("timetable_period_classes")
    op.drop_index("ix_timetable_periods_teacher_term_day", table_name="timetable_periods")
    op.drop_index("ix_timetable_periods_academic_term_id", table_name="timetable_periods")
    op.drop_table("timetable_periods")
    day_of_week.drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_class_sections_name", table_name="class_sections")
    op.drop_table("class_sections")
    op.drop_index("ix_teachers_email", table_name="teachers")
    op.drop_table("teachers")
    op.drop_index("ix_academic_terms_name", table_name="academic_terms")
    op.drop_table("academic_terms")
