"""membership change requests

Revision ID: 8e21f4c07a3d
Revises: 3a7c1e52b9d0
Create Date: 2026-10-17 15:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "8e21f4c07a3d"
down_revision = "3a7c1e52b9d0"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "membership_change",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("membership_id", sa.Integer(), sa.ForeignKey("membership.id"), nullable=False),
        sa.Column("updated_data", sa.JSON(), nullable=False),
        sa.Column("modified_by", sa.String(255)),
        sa.Column("approval_status", sa.String(20), nullable=False),
        sa.Column("decline_reason", sa.Text()),
        sa.Column("decided_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_membership_change_approval_status", "membership_change", ["approval_status"])


def downgrade() -> None:
    op.drop_index("ix_membership_change_approval_status", table_name="membership_change")
    op.drop_table("membership_change")
