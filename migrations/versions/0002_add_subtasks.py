"""add parent_task_id for subtasks"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_subtasks"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("tasks", sa.Column("parent_task_id", sa.Integer(), nullable=True))
    op.create_index("ix_tasks_parent_task_id", "tasks", ["parent_task_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tasks_parent_task_id", table_name="tasks")
    op.drop_column("tasks", "parent_task_id")
