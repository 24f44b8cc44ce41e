"""Time-triggered publishing of scheduled pages."""

import logging
from datetime import UTC, datetime

from storefront.core.exceptions import StorefrontError
from storefront.repositories.base import PageRepository

logger = logging.getLogger(__name__)


async def publish_due_pages(repo: PageRepository, now: datetime | None = None) -> list[str]:
    """Publish every scheduled page whose ``scheduled_for`` has passed.

    A page that cannot be published (e.g. its slug is now taken) stays
    scheduled and does not stop the others.
    """
    now = now or datetime.now(UTC)
    published: list[str] = []
    for page in await repo.list_pages(status="scheduled"):
        if page.scheduled_for is None or page.scheduled_for > now:
            continue
        try:
            await repo.publish(page.id, note="Scheduled publish")
        except StorefrontError as exc:
            logger.warning("Scheduled page %s not published: %s", page.id, exc.detail)
            continue
        published.append(page.id)
    if published:
        logger.info("Published %d scheduled page(s) in store %s", len(published), repo.store_id)
    return published
