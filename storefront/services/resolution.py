"""Which published page does a storefront URL show?"""

import logging
import re

from storefront.repositories.base import PublicPageRepository
from storefront.schemas.page import SYSTEM_PAGE_TYPES, PageDocument, PublishedPageSummary

logger = logging.getLogger(__name__)

HOME_SLUG_CANDIDATES = ("/", "/home", "home")

_WHITESPACE = re.compile(r"\s+")


def normalize_path(requested_path: str | None) -> str:
    """Strip one leading slash. ``None``, ``""`` and ``"/"`` all become ``""``."""
    path = requested_path or ""
    return path[1:] if path.startswith("/") else path


def is_home_path(requested_path: str | None) -> bool:
    return normalize_path(requested_path) == ""


async def resolve_page(repo: PublicPageRepository, requested_path: str | None) -> PageDocument | None:
    """Resolve a requested path to a published page, or ``None``.

    Exact slug match first. The home path then falls back to well-known home
    slugs, a page named like "home", and finally the first published page.
    Other paths fall back to a case-insensitive name match (hyphens read as
    spaces, or the name hyphenated) or a slug match with or without slashes.
    """
    page_slug = normalize_path(requested_path)
    if page_slug == "":
        exact = await repo.get_published_page_by_slug("/")
    else:
        exact = await repo.get_published_page_by_slug(page_slug)
    if exact is not None:
        return _published_or_none(exact)

    candidates = [p for p in await repo.get_all_published_pages() if p.page_type not in SYSTEM_PAGE_TYPES]
    if not candidates:
        return None

    match = _match_home(candidates) if page_slug == "" else _match_path(candidates, page_slug)
    if match is None:
        logger.debug("No published page matches path %r", requested_path)
        return None
    return _published_or_none(await repo.get_published_page_by_id(match.id))


def _match_home(pages: list[PublishedPageSummary]) -> PublishedPageSummary:
    for slug in HOME_SLUG_CANDIDATES:
        for page in pages:
            if page.slug == slug:
                return page
    for page in pages:
        if "home" in page.name.lower():
            return page
    return pages[0]


def _match_path(pages: list[PublishedPageSummary], page_slug: str) -> PublishedPageSummary | None:
    wanted_name = page_slug.replace("-", " ").lower()
    bare = page_slug.lstrip("/")
    slugs = {page_slug, f"/{page_slug}", bare, f"/{bare}", page_slug.replace("/", "")}
    for page in pages:
        name = page.name.lower()
        # "About  Us" also answers to "about-us"
        if name == wanted_name or _WHITESPACE.sub("-", name) == page_slug or page.slug in slugs:
            return page
    return None


def _published_or_none(doc: PageDocument | None) -> PageDocument | None:
    if doc is not None and doc.status != "published":
        logger.warning("Repository returned unpublished page %s; ignoring it", doc.id)
        return None
    return doc


async def resolve_system_page(repo: PublicPageRepository, page_type: str) -> PageDocument | None:
    """Header/footer lookup. Bypasses path resolution entirely."""
    if page_type not in SYSTEM_PAGE_TYPES:
        raise ValueError(f"Unknown system page type '{page_type}'")
    return _published_or_none(await repo.get_published_system_page(page_type))
