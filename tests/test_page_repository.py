"""Editor repository: lifecycle transitions, publish rules, history and scheduling."""

from datetime import UTC, datetime, timedelta

import pytest

from storefront.core.exceptions import InvalidTransitionError, PageConflictError, PageNotFoundError
from storefront.repositories.base import PAGE_TRANSITIONS
from storefront.repositories.memory import InMemoryPageStorage
from storefront.schemas.page import PageCreate, PageTemplate
from storefront.schemas.store import StoreInfo
from storefront.services.publishing import publish_due_pages
from storefront.widgets.registry import WidgetRegistry
from tests.helpers import make_document, publish_document, section, widget


async def test_create_page_starts_as_draft(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    template = PageTemplate(id="tpl", name="Landing", sections=[section("s1", widget("w1"))])
    doc = await repo.create_page(PageCreate(name="Landing", slug="landing", template=template))

    assert doc.id.startswith("page_")
    assert doc.status == "draft"
    assert doc.sections[0].id == "s1"
    assert (await repo.get_page(doc.id)).name == "Landing"


async def test_save_draft_overwrites_and_migrates(storage: InMemoryPageStorage, store: StoreInfo, registry: WidgetRegistry):
    repo = storage.pages(store.id, registry)
    await repo.save_draft(make_document("page_1", "Home", "/"))
    replaced = make_document("page_1", "Home v2", "/", sections=[section("s9", widget("old", version=1))])
    saved = await repo.save_draft(replaced)

    stored = await repo.get_page("page_1")
    assert stored.name == "Home v2"
    assert [s.id for s in stored.sections] == ["s9"]
    assert stored.find_widget("old").version == 2
    assert saved.updated_at is not None


async def test_saving_a_published_page_makes_it_draft(storage: InMemoryPageStorage, store: StoreInfo):
    published = await publish_document(storage, store, make_document("page_1", "Home", "/"))
    saved = await storage.pages(store.id).save_draft(published)
    assert saved.status == "draft"
    assert saved.published_at == published.published_at


async def test_publish_records_history(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await repo.save_draft(make_document("page_1", "Home", "/"))
    published = await repo.publish("page_1", author_id="editor-1", note="Launch")

    assert published.status == "published"
    assert published.published_at is not None
    history = await repo.list_versions("page_1")
    assert len(history) == 1
    assert history[0].author_id == "editor-1"
    assert history[0].note == "Launch"
    assert history[0].snapshot.status == "published"


@pytest.mark.parametrize(
    ("path", "requested"),
    [
        (["archived"], "published"),
        (["archived"], "scheduled"),
        ([], "draft"),
        (["published"], "scheduled"),
    ],
)
async def test_invalid_transitions(storage: InMemoryPageStorage, store: StoreInfo, path, requested):
    repo = storage.pages(store.id)
    await repo.save_draft(make_document("page_1", "Home", "/"))
    for status in path:
        await {"archived": repo.archive, "published": repo.publish}[status]("page_1")

    actions = {
        "published": lambda: repo.publish("page_1"),
        "scheduled": lambda: repo.schedule("page_1", datetime.now(UTC)),
        "draft": lambda: repo.unpublish("page_1"),
    }
    with pytest.raises(InvalidTransitionError) as exc_info:
        await actions[requested]()
    assert exc_info.value.allowed == sorted(PAGE_TRANSITIONS[(path or ["draft"])[-1]])


async def test_archive_and_back_to_draft(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await publish_document(storage, store, make_document("page_1", "Home", "/"))
    assert (await repo.archive("page_1")).status == "archived"
    assert (await repo.unpublish("page_1")).status == "draft"


async def test_published_slug_must_be_unique(storage: InMemoryPageStorage, store: StoreInfo):
    """Drafts may share a slug; only one of them can be published."""
    repo = storage.pages(store.id)
    await publish_document(storage, store, make_document("page_1", "About", "about"))
    await repo.save_draft(make_document("page_2", "About again", "about"))
    with pytest.raises(PageConflictError):
        await repo.publish("page_2")


async def test_only_one_published_header(storage: InMemoryPageStorage, store: StoreInfo):
    await publish_document(storage, store, make_document("page_h1", "Header", "/header", pageType="header"))
    await storage.pages(store.id).save_draft(make_document("page_h2", "New header", "/header-2", pageType="header"))
    with pytest.raises(PageConflictError):
        await storage.pages(store.id).publish("page_h2")


async def test_restore_version(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await publish_document(storage, store, make_document("page_1", "Home", "/"))
    version_id = (await repo.list_versions("page_1"))[0].id
    await repo.save_draft(make_document("page_1", "Home (edited)", "/", sections=[]))

    restored = await repo.restore_version("page_1", version_id)
    assert restored.status == "draft"
    assert restored.name == "Home"
    assert restored.sections
    history = await repo.list_versions("page_1")
    assert len(history) == 2
    assert history[0].note == "Backup before version restore"
    assert history[0].snapshot.name == "Home (edited)"


async def test_unknown_version(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await repo.save_draft(make_document("page_1", "Home", "/"))
    with pytest.raises(PageNotFoundError):
        await repo.get_version("page_1", "version_missing")


async def test_delete_removes_document_and_history(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    await publish_document(storage, store, make_document("page_1", "Home", "/"))
    await repo.delete_page("page_1")
    assert await repo.get_page("page_1") is None
    assert storage.db.history == []
    with pytest.raises(PageNotFoundError):
        await repo.delete_page("page_1")


async def test_pages_are_store_scoped(storage: InMemoryPageStorage, store: StoreInfo):
    from storefront.schemas.store import StoreCreate

    other = await storage.create_store(StoreCreate(store_name="Other", store_slug="other"))
    await storage.pages(store.id).save_draft(make_document("page_1", "Home", "/"))
    assert await storage.pages(other.id).get_page("page_1") is None
    assert await storage.pages(other.id).list_pages() == []


async def test_publish_due_pages(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    now = datetime.now(UTC)
    await repo.save_draft(make_document("page_due", "Due", "due"))
    await repo.save_draft(make_document("page_later", "Later", "later"))
    await repo.schedule("page_due", now - timedelta(minutes=1))
    await repo.schedule("page_later", now + timedelta(days=1))

    assert await publish_due_pages(repo, now) == ["page_due"]
    assert (await repo.get_page("page_due")).status == "published"
    assert (await repo.get_page("page_later")).status == "scheduled"


async def test_publish_due_skips_conflicts(storage: InMemoryPageStorage, store: StoreInfo):
    repo = storage.pages(store.id)
    now = datetime.now(UTC)
    await publish_document(storage, store, make_document("page_live", "Live", "sale"))
    await repo.save_draft(make_document("page_due", "Due", "sale"))
    await repo.schedule("page_due", now - timedelta(minutes=1))

    assert await publish_due_pages(repo, now) == []
    assert (await repo.get_page("page_due")).status == "scheduled"


async def test_saved_document_round_trips_through_the_repository(storage: InMemoryPageStorage, store: StoreInfo):
    """sections, status, navigationPlacement and the palette override survive save, publish and reload."""
    repo = storage.pages(store.id)
    doc = make_document(
        "page_rt",
        "Round Trip",
        "round-trip",
        navigationPlacement="both",
        themeOverrides={
            "colorPalette": {
                "paletteId": "ocean",
                "customColors": {"primary": "#FF0000"},
                "applyOptions": {"borders": False},
            }
        },
        sections=[
            section("s1", widget("w1", props={"content": "Hello"}), widget("w2", "spacer", props={"height": 24})),
            section("s2", widget("w3", "button", props={"text": "Go", "url": "/go"}, conditions={"showWhen": "true"})),
        ],
    )

    await repo.save_draft(doc)
    draft = await repo.get_page("page_rt")
    assert draft.status == "draft"
    assert [s.model_dump(by_alias=True) for s in draft.sections] == [s.model_dump(by_alias=True) for s in doc.sections]
    assert draft.navigation_placement == "both"
    assert draft.color_palette.model_dump() == doc.color_palette.model_dump()

    await repo.publish("page_rt")
    public = await storage.public(store.id).get_published_page_by_id("page_rt")
    assert public.status == "published"
    assert [s.model_dump(by_alias=True) for s in public.sections] == [s.model_dump(by_alias=True) for s in doc.sections]
    assert public.navigation_placement == "both"
    assert public.color_palette.custom_colors == {"primary": "#FF0000"}
    assert public.color_palette.model_dump() == doc.color_palette.model_dump()
