"""Page resolution: exact slugs, home fallbacks and name matching."""

import pytest

from storefront.repositories.memory import InMemoryPageStorage
from storefront.schemas.store import StoreInfo
from storefront.services.resolution import is_home_path, normalize_path, resolve_page, resolve_system_page
from tests.helpers import make_document, publish_document


@pytest.mark.parametrize(("raw", "expected"), [(None, ""), ("", ""), ("/", ""), ("/about", "about"), ("about", "about")])
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_home_paths():
    assert is_home_path("") and is_home_path("/") and is_home_path(None)
    assert not is_home_path("/home")


async def test_exact_home_slug(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_a", "Alpha", "alpha"))
    await publish_document(storage, store, make_document("page_root", "Start", "/"))
    repo = storage.public(store.id)
    for path in ("", "/"):
        assert (await resolve_page(repo, path)).id == "page_root"


async def test_home_falls_back_to_home_slug(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_a", "Alpha", "alpha"))
    await publish_document(storage, store, make_document("page_h", "Welcome", "/home"))
    assert (await resolve_page(storage.public(store.id), "")).id == "page_h"


async def test_home_falls_back_to_name(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_a", "Alpha", "alpha"))
    await publish_document(storage, store, make_document("page_h", "Our Homepage", "start"))
    assert (await resolve_page(storage.public(store.id), "/")).id == "page_h"


async def test_home_last_resort_is_first_published(storage: InMemoryPageStorage, store: StoreInfo):
    """The only published page becomes home even if it is not in navigation."""
    doc = make_document("page_only", "Only Page", "/only-page", navigationPlacement="none")
    await publish_document(storage, store, doc)
    repo = storage.public(store.id)

    assert await repo.get_navigation_pages() == []
    resolved = await resolve_page(repo, "")
    assert resolved.id == "page_only"
    assert resolved.sections


async def test_home_skips_system_pages(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_hdr", "A Header", "/header", pageType="header"))
    assert await resolve_page(storage.public(store.id), "") is None


async def test_home_with_no_published_pages(storage: InMemoryPageStorage, store: StoreInfo):
    await storage.pages(store.id).save_draft(make_document("page_d", "Home", "/"))
    assert await resolve_page(storage.public(store.id), "") is None


async def test_exact_slug(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_c", "Contact", "contact"))
    assert (await resolve_page(storage.public(store.id), "/contact")).id == "page_c"


@pytest.mark.parametrize("path", ["contact-us", "/contact-us", "Contact-Us"])
async def test_name_match_with_hyphens(storage: InMemoryPageStorage, store: StoreInfo, path: str):
    """Hyphens in the path read as spaces when matching page names."""
    await publish_document(storage, store, make_document("page_c", "Contact Us", "reach-out"))
    assert (await resolve_page(storage.public(store.id), path)).id == "page_c"


async def test_slug_with_leading_slash(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_f", "Frequently Asked", "/faq"))
    assert (await resolve_page(storage.public(store.id), "faq")).id == "page_f"


async def test_name_with_whitespace_runs_matches_hyphenated_path(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_a", "About  Us", "company"))
    assert (await resolve_page(storage.public(store.id), "about-us")).id == "page_a"


async def test_slug_with_inner_slashes_removed(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_t", "Terms", "legalterms"))
    assert (await resolve_page(storage.public(store.id), "legal/terms")).id == "page_t"


async def test_unmatched_path(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_c", "Contact", "contact"))
    assert await resolve_page(storage.public(store.id), "missing") is None


async def test_unpublished_pages_never_resolve(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await repo.save_draft(make_document("page_draft", "Draft", "draft"))
    await publish_document(storage, store, make_document("page_arch", "Archived", "archived"))
    await repo.archive("page_arch")
    public = storage.public(store.id)
    assert await resolve_page(public, "draft") is None
    assert await resolve_page(public, "archived") is None
    assert await resolve_page(public, "") is None


async def test_empty_sections_still_resolve(storage: InMemoryPageStorage, store: StoreInfo):
    """Resolution returns the page; renderability is a separate question."""
    await publish_document(storage, store, make_document("page_e", "Empty", "empty", sections=[]))
    resolved = await resolve_page(storage.public(store.id), "empty")
    assert resolved.id == "page_e"
    assert not resolved.is_renderable


async def test_other_stores_are_invisible(storage: InMemoryPageStorage, store: StoreInfo):
    from storefront.schemas.store import StoreCreate

    other = await storage.create_store(StoreCreate(store_name="Other", store_slug="other"))
    await publish_document(storage, other, make_document("page_o", "Contact", "contact"))
    assert await resolve_page(storage.public(store.id), "contact") is None


async def test_system_page_by_type_then_slug(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_ft", "Site footer", "/footer"))
    repo = storage.public(store.id)
    assert (await resolve_system_page(repo, "footer")).id == "page_ft"
    assert await resolve_system_page(repo, "header") is None

    await publish_document(storage, store, make_document("page_hd", "Top", "top", pageType="header"))
    assert (await resolve_system_page(repo, "header")).id == "page_hd"

    with pytest.raises(ValueError):
        await resolve_system_page(repo, "sidebar")
