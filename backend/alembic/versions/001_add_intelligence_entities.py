"""Add intelligence_entities table for recorded analyses.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    insp = sa.inspect(conn)
    if "intelligence_entities" in insp.get_table_names():
        return

    op.create_table(
        "intelligence_entities",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("entity_type", sa.String(255), nullable=False),
        sa.Column("observations", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_intelligence_entities_entity_type", "intelligence_entities", ["entity_type"], unique=False)
    op.create_index("ix_intelligence_entities_updated_at", "intelligence_entities", ["updated_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_intelligence_entities_updated_at", table_name="intelligence_entities")
    op.drop_index("ix_intelligence_entities_entity_type", table_name="intelligence_entities")
    op.drop_table("intelligence_entities")
