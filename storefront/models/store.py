import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base


class Store(Base):
    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, server_default=func.gen_random_uuid())
    store_name: Mapped[str] = mapped_column(String(255), nullable=False)
    store_slug: Mapped[str] = mapped_column(String(63), unique=True, nullable=False)
    store_logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    pages: Mapped[list["PageDocumentRow"]] = relationship(  # noqa: F821
        back_populates="store", cascade="all, delete-orphan", passive_deletes=True
    )
