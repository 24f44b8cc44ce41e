"""Store request/response schemas."""

import re
import uuid
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from storefront.schemas.common import CamelModel

SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")


class StoreCreate(CamelModel):
    store_name: str = Field(..., min_length=1, max_length=255)
    store_slug: str = Field(..., min_length=3, max_length=63)
    store_logo_url: str | None = None

    @field_validator("store_slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        if not SLUG_PATTERN.match(v):
            raise ValueError(
                "Slug must be 3-63 chars, lowercase alphanumeric with hyphens, "
                "cannot start or end with a hyphen"
            )
        return v


class StoreInfo(CamelModel):
    """Public store shape returned by the page repository."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_name: str
    store_slug: str
    store_logo_url: str | None = None
    is_active: bool = True


class StoreResponse(StoreInfo):
    created_at: datetime | None = None
