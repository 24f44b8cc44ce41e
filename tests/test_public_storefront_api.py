"""Public storefront endpoints: composition, navigation, theme CSS and form submit."""

import pytest
from httpx import AsyncClient

from storefront.core.dependencies import get_form_dispatcher
from storefront.main import app
from storefront.repositories.memory import InMemoryPageStorage
from storefront.schemas.store import StoreInfo
from tests.helpers import make_document, publish_document, section, widget

pytestmark = pytest.mark.api

CONTACT_FORM = {
    "title": "Contact",
    "fields": [
        {"id": "name", "type": "text", "label": "Name", "required": True},
        {"id": "email", "type": "email", "label": "Email", "required": True},
    ],
    "actions": {"onSubmit": "email", "emailTo": "owner@example.com", "successMessage": "Thanks!"},
}


class _StubSender:
    def __init__(self):
        self.sent = []

    async def send(self, to, subject, values):
        self.sent.append((to, subject, values))


@pytest.fixture
def sender():
    from storefront.services.form_actions import FormActionDispatcher

    stub = _StubSender()
    app.dependency_overrides[get_form_dispatcher] = lambda: FormActionDispatcher(stub)
    yield stub
    app.dependency_overrides.pop(get_form_dispatcher, None)


async def _seed(storage: InMemoryPageStorage, store: StoreInfo) -> None:
    await publish_document(
        storage,
        store,
        make_document(
            "page_home",
            "Home",
            "/",
            sections=[section("s1", widget("hello", props={"content": "Welcome to {{storeName}}"}))],
            themeOverrides={"colorPalette": {"paletteId": "ocean"}},
        ),
    )
    await publish_document(
        storage,
        store,
        make_document(
            "page_contact",
            "Contact Us",
            "contact",
            navigationPlacement="footer",
            sections=[section("s1", widget("form1", "form", props=CONTACT_FORM))],
        ),
    )
    await storage.pages(store.id).save_draft(make_document("page_draft", "Secret", "secret"))


async def test_home_page(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo):
    await _seed(storage, store)
    resp = await client.get("/api/v1/storefront/acme")
    assert resp.status_code == 200
    data = resp.json()
    assert data["pageFound"] is True
    assert data["store"]["storeName"] == "Acme Goods"
    assert data["page"]["id"] == "page_home"
    assert data["page"]["cssVariables"]["--color-primary"] == "#006994"
    hello = data["page"]["sections"][0]["rows"][0]["widgets"][0]
    assert hello["props"]["content"] == "Welcome to Acme Goods"
    assert [link["href"] for link in data["navigation"]["footer"]] == ["/store/acme/contact"]


async def test_nested_page_path(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo):
    await _seed(storage, store)
    resp = await client.get("/api/v1/storefront/acme/pages/contact-us")
    assert resp.json()["page"]["id"] == "page_contact"


async def test_draft_pages_are_not_served(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo):
    await _seed(storage, store)
    resp = await client.get("/api/v1/storefront/acme/pages/secret")
    assert resp.status_code == 200
    assert resp.json()["pageFound"] is False
    assert resp.json()["page"] is None


async def test_unknown_store(client: AsyncClient):
    resp = await client.get("/api/v1/storefront/ghost-town")
    assert resp.status_code == 404
    assert resp.json()["title"] == "Store Not Found"


async def test_navigation_endpoint(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo):
    await _seed(storage, store)
    resp = await client.get("/api/v1/storefront/acme/navigation")
    assert resp.json() == {
        "header": [],
        "footer": [
            {
                "id": "page_contact",
                "name": "Contact Us",
                "slug": "contact",
                "href": "/store/acme/contact",
                "placement": "footer",
            }
        ],
    }


async def test_theme_css(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo):
    await _seed(storage, store)
    resp = await client.get("/api/v1/storefront/acme/theme.css")
    assert resp.headers["content-type"].startswith("text/css")
    assert "--color-primary: #006994;" in resp.text
    assert (await client.get("/api/v1/storefront/acme/theme.css?page=contact")).text == ""


async def test_form_submit_success(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo, sender):
    await _seed(storage, store)
    resp = await client.post(
        "/api/v1/storefront/acme/forms/page_contact/form1",
        json={"values": {"name": "Ada", "email": "ada@example.com"}},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "success"
    assert resp.json()["message"] == "Thanks!"
    assert sender.sent[0][0] == "owner@example.com"
    assert sender.sent[0][2]["email"] == "ada@example.com"


async def test_form_submit_invalid(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo, sender):
    await _seed(storage, store)
    resp = await client.post(
        "/api/v1/storefront/acme/forms/page_contact/form1",
        json={"values": {"name": "", "email": "nope"}},
    )
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"name": "Name is required", "email": "Please enter a valid email address"}
    assert sender.sent == []


async def test_form_submit_unknown_widget(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo, sender):
    await _seed(storage, store)
    resp = await client.post("/api/v1/storefront/acme/forms/page_home/hello", json={"values": {}})
    assert resp.status_code == 404


async def test_form_submit_with_misconfigured_form(client: AsyncClient, storage: InMemoryPageStorage, store: StoreInfo, sender):
    """A published form whose props fail validation answers with a problem, not a crash."""
    broken_form = {"fields": [{"id": "x", "type": "hologram", "label": "X"}]}
    await publish_document(
        storage,
        store,
        make_document("page_broken", "Broken", "broken", sections=[section("s1", widget("form1", "form", props=broken_form))]),
    )
    resp = await client.post("/api/v1/storefront/acme/forms/page_broken/form1", json={"values": {"x": "1"}})
    assert resp.status_code == 422
    assert resp.headers["content-type"] == "application/problem+json"
    assert resp.json()["title"] == "Invalid Form"
    assert sender.sent == []
