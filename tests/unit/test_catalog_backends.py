"""
Unit tests for the SQL and HTTP catalog backends
"""
import threading

import httpx
import pytest

from accessmenu.services.catalog_provider import HttpCatalogProvider, SqlCatalogProvider
from accessmenu.services.catalog_store import CatalogEntry, SqlCatalogStore


@pytest.mark.asyncio
async def test_sql_provider_reads_menu(session_factory, seeded_menu_id, sample_dishes):
    provider = SqlCatalogProvider(session_factory)

    menu = await provider.fetch_menu(seeded_menu_id)

    assert menu is not None
    assert menu.name == "Bangkok Kitchen"
    assert [d.display_name("en") for d in menu.dishes] == [d["name"]["en"] for d in sample_dishes]
    coffee = menu.dishes[-1]
    assert coffee.unit_price("large") == 4.5
    assert coffee.allergens == ["Milk"]


@pytest.mark.asyncio
async def test_sql_provider_missing_menu(session_factory):
    provider = SqlCatalogProvider(session_factory)
    assert await provider.fetch_menu("999") is None
    assert await provider.fetch_menu("not-a-number") is None


@pytest.mark.asyncio
async def test_sql_provider_reads_off_the_event_loop_thread(session_factory, seeded_menu_id):
    loop_thread = threading.get_ident()
    seen = []

    def tracking_factory():
        seen.append(threading.get_ident())
        return session_factory()

    menu = await SqlCatalogProvider(tracking_factory).fetch_menu(seeded_menu_id)

    assert menu is not None
    assert seen and loop_thread not in seen


@pytest.fixture
def menu_payload(sample_dishes):
    return {"id": "remote-7", "name": "Street Food", "dishes": sample_dishes[:2]}


@pytest.mark.asyncio
async def test_http_provider_reads_bare_payload(menu_payload):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v2/menus/remote-7"
        return httpx.Response(200, json=menu_payload)

    provider = HttpCatalogProvider("https://catalog.example/v2/", transport=httpx.MockTransport(handler))
    menu = await provider.fetch_menu("remote-7")

    assert menu.id == "remote-7"
    assert len(menu.dishes) == 2


@pytest.mark.asyncio
async def test_http_provider_unwraps_envelope(menu_payload):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"status": "ok", "data": menu_payload})
    )
    provider = HttpCatalogProvider("https://catalog.example", transport=transport)
    menu = await provider.fetch_menu("remote-7")
    assert menu.name == "Street Food"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(404),
    httpx.Response(500, text="boom"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"id": "x", "name": "Bad", "dishes": [{"id": 1, "name": {"zh": "无"}, "price": 1}]}),
])
async def test_http_provider_failures_resolve_to_none(response):
    provider = HttpCatalogProvider("https://catalog.example", transport=httpx.MockTransport(lambda r: response))
    assert await provider.fetch_menu("x") is None


@pytest.mark.asyncio
async def test_http_provider_transport_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    provider = HttpCatalogProvider("https://catalog.example", transport=httpx.MockTransport(handler))
    assert await provider.fetch_menu("x") is None


def test_sql_store_round_trip(session_factory):
    store = SqlCatalogStore(session_factory)
    assert store.list_names("en") == []

    assert store.insert_dish(CatalogEntry(
        name="Khao Soi",
        language="en",
        menu_language="en",
        explanation="Northern Thai curry noodle soup",
        tags=["noodles"],
        allergens=["gluten"],
        cuisine="thai",
    ))
    store.insert_dish(CatalogEntry(name="Khao Soi", language="es", menu_language="en", explanation="Sopa"))

    assert store.list_names("en") == ["Khao Soi"]
    assert store.list_names("es") == ["Khao Soi"]
    assert store.list_names("fr") == []
