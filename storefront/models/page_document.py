from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import StoreScopedBase


class PageDocumentRow(StoreScopedBase):
    """Persisted page document. Columns are the snake_case side of the mapping."""

    __tablename__ = "page_documents"
    __table_args__ = (
        # Published slugs are unique per store; drafts may collide.
        Index(
            "uq_page_documents_store_published_slug",
            "store_id",
            "slug",
            unique=True,
            postgresql_where=text("status = 'published'"),
        ),
        Index(
            "uq_page_documents_store_published_system_page",
            "store_id",
            "page_type",
            unique=True,
            postgresql_where=text("status = 'published' AND page_type IN ('header', 'footer')"),
        ),
    )

    # Editor-generated ids ("page_<ts>_<rand>") are kept verbatim.
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # store_id inherited from StoreScopedBase
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="draft")
    page_type: Mapped[str] = mapped_column(String(20), nullable=False, server_default="page")
    navigation_placement: Mapped[str] = mapped_column(
        String(10), nullable=False, server_default="none"
    )
    footer_column: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sections: Mapped[list] = mapped_column(JSONB, nullable=False, server_default="[]")
    theme_overrides: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    seo: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    custom_code: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    global_styles: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    scheduled_for: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    store: Mapped["Store"] = relationship(back_populates="pages")  # noqa: F821


class PageHistoryRow(StoreScopedBase):
    """Snapshot of a page document taken at publish/restore time."""

    __tablename__ = "page_history"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    page_id: Mapped[str] = mapped_column(
        ForeignKey("page_documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    snapshot: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
