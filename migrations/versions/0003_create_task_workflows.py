"""create task workflow history table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0003_create_task_workflows"
down_revision = "0002_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "task_workflows",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
    )
    op.create_index("ix_task_workflows_task_id", "task_workflows", ["task_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_task_workflows_task_id", table_name="task_workflows")
    op.drop_table("task_workflows")
