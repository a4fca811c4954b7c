"""create offline pending changes

Revision ID: 20261019_0004
Revises: 20261019_0003
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0004"
down_revision = "20261019_0003"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "offline_pending_changes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("change_id", sa.String(length=100), nullable=False),
        sa.Column("change_type", sa.String(length=20), nullable=False),
        sa.Column("change_action", sa.String(length=50), nullable=False),
        sa.Column("change_data", sa.JSON(), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("device_id", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "change_id", name="uq_offline_pending_changes_user_change"),
    )
    op.create_index("ix_offline_pending_changes_user_id", "offline_pending_changes", ["user_id"], unique=False)
    op.create_index("ix_offline_pending_changes_change_type", "offline_pending_changes", ["change_type"], unique=False)
    op.create_index("ix_offline_pending_changes_created_at", "offline_pending_changes", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_offline_pending_changes_created_at", table_name="offline_pending_changes")
    op.drop_index("ix_offline_pending_changes_change_type", table_name="offline_pending_changes")
    op.drop_index("ix_offline_pending_changes_user_id", table_name="offline_pending_changes")
    op.drop_table("offline_pending_changes")
