"""Create categories, webhooks and webhook_responses tables."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("color", sa.Text(), nullable=False, server_default="#6E42CE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # headers / example_payloads hold JSON-encoded text
    op.create_table(
        "webhooks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "category_id",
            sa.String(36),
            sa.ForeignKey("categories.id", name="fk_webhooks_category_id_categories", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("method", sa.String(10), nullable=False),
        sa.Column("headers", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("default_payload", sa.Text(), nullable=False, server_default=""),
        sa.Column("example_payloads", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_webhooks_category_id", "webhooks", ["category_id"])

    op.create_table(
        "webhook_responses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "webhook_id",
            sa.String(36),
            sa.ForeignKey("webhooks.id", name="fk_webhook_responses_webhook_id_webhooks", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("status_text", sa.Text(), nullable=False, server_default=""),
        sa.Column("headers", sa.JSON(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("data_format", sa.String(8), nullable=False, server_default="text"),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_webhook_responses_webhook_id_timestamp",
        "webhook_responses",
        ["webhook_id", "timestamp"],
    )


def downgrade() -> None:
    # Drop tables in reverse order (responses first due to FK)
    op.drop_index("ix_webhook_responses_webhook_id_timestamp", table_name="webhook_responses")
    op.drop_table("webhook_responses")
    op.drop_index("ix_webhooks_category_id", table_name="webhooks")
    op.drop_table("webhooks")
    op.drop_table("categories")
