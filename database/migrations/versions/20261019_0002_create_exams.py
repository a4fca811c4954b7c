"""create exams

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "exams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("course_code", sa.String(length=20), nullable=False),
        sa.Column("course_name", sa.String(length=100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=False),
        sa.Column("venue", sa.String(length=100), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="upcoming"),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("duration > 0", name="ck_exams_duration_positive"),
    )
    op.create_index("ix_exams_date", "exams", ["date"], unique=False)
    op.create_index("ix_exams_course_code", "exams", ["course_code"], unique=False)
    op.create_index("ix_exams_created_by", "exams", ["created_by"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_exams_created_by", table_name="exams")
    op.drop_index("ix_exams_course_code", table_name="exams")
    op.drop_index("ix_exams_date", table_name="exams")
    op.drop_table("exams")
