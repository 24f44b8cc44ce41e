"""Create stores, page_documents and page_history with RLS

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_STORE = "NULLIF(current_setting('app.current_store', true), '')::uuid"

_SCOPED_TABLES = ["page_documents", "page_history"]


def _create_store_policies(table: str) -> None:
    op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
    op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY store_isolation_select ON {table}
        FOR SELECT
        USING (store_id = {_STORE})
    """)
    op.execute(f"""
        CREATE POLICY store_isolation_insert ON {table}
        FOR INSERT
        WITH CHECK (store_id = {_STORE})
    """)
    op.execute(f"""
        CREATE POLICY store_isolation_update ON {table}
        FOR UPDATE
        USING (store_id = {_STORE})
        WITH CHECK (store_id = {_STORE})
    """)
    op.execute(f"""
        CREATE POLICY store_isolation_delete ON {table}
        FOR DELETE
        USING (store_id = {_STORE})
    """)


def upgrade() -> None:
    op.create_table(
        "stores",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("store_name", sa.String(255), nullable=False),
        sa.Column("store_slug", sa.String(63), nullable=False, unique=True),
        sa.Column("store_logo_url", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "page_documents",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "store_id",
            sa.UUID(),
            sa.ForeignKey("stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("page_type", sa.String(20), nullable=False, server_default="page"),
        sa.Column("navigation_placement", sa.String(10), nullable=False, server_default="none"),
        sa.Column("footer_column", sa.Integer(), nullable=True),
        sa.Column("sections", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("theme_overrides", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("seo", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("custom_code", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("global_styles", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('draft', 'published', 'archived', 'scheduled')",
            name="ck_page_documents_status",
        ),
        sa.CheckConstraint(
            "navigation_placement IN ('header', 'footer', 'both', 'none')",
            name="ck_page_documents_navigation_placement",
        ),
    )
    op.create_index("ix_page_documents_store_id", "page_documents", ["store_id"])
    op.create_index("ix_page_documents_slug", "page_documents", ["slug"])
    op.create_index(
        "uq_page_documents_store_published_slug",
        "page_documents",
        ["store_id", "slug"],
        unique=True,
        postgresql_where=sa.text("status = 'published'"),
    )
    # One published header and one published footer per store.
    op.create_index(
        "uq_page_documents_store_published_system_page",
        "page_documents",
        ["store_id", "page_type"],
        unique=True,
        postgresql_where=sa.text("status = 'published' AND page_type IN ('header', 'footer')"),
    )

    op.create_table(
        "page_history",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "store_id",
            sa.UUID(),
            sa.ForeignKey("stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "page_id",
            sa.String(64),
            sa.ForeignKey("page_documents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.String(255), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("snapshot", postgresql.JSONB(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_page_history_store_id", "page_history", ["store_id"])
    op.create_index("ix_page_history_page_id", "page_history", ["page_id"])

    # --- RLS ---
    for table in _SCOPED_TABLES:
        _create_store_policies(table)

    # --- Grant permissions to app_user ---
    op.execute("GRANT SELECT, INSERT, UPDATE, DELETE ON stores TO app_user")
    for table in _SCOPED_TABLES:
        op.execute(f"GRANT SELECT, INSERT, UPDATE, DELETE ON {table} TO app_user")


def downgrade() -> None:
    for table in reversed(_SCOPED_TABLES):
        for action in ("select", "insert", "update", "delete"):
            op.execute(f"DROP POLICY IF EXISTS store_isolation_{action} ON {table}")
    op.drop_table("page_history")
    op.drop_table("page_documents")
    op.drop_table("stores")
