from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "swap_events",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("transaction_signature", sa.String(100), index=True),
        sa.Column("slot", sa.BigInteger, index=True),
        sa.Column("amount_in", sa.String(24)),
        sa.Column("min_amount_out", sa.String(24)),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )


def downgrade():
    op.drop_table("swap_events")
