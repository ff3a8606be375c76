import pytest
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.models import Event, Purchase
from app.routes import accounts as account_routes
from app.routes import tracking as tracking_routes
from app.services import tracking as tracking_service
from app.services.tracking import (
    InvalidProductError,
    get_product_sales,
    parse_quantity,
    record_purchase,
    track_event,
)

from conftest import FakeSession, make_get_session

AUTH = {"Authorization": "good-key"}


@pytest.fixture
def authorized(monkeypatch: pytest.MonkeyPatch):
    async def fake_is_valid_api_key(api_key: str) -> bool:
        return api_key == "good-key"

    monkeypatch.setattr(account_routes, "is_valid_api_key", fake_is_valid_api_key)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, 1),
        ("", 1),
        ("3", 3),
        (" 4 ", 4),
        ("5kg", 5),
        ("0", 1),
        ("-2", 1),
        ("many", 1),
    ],
)
def test_parse_quantity(raw, expected):
    assert parse_quantity(raw) == expected


@pytest.mark.asyncio
async def test_track_event_writes_row_then_counter(monkeypatch: pytest.MonkeyPatch, fake_session: FakeSession):
    bumped: list[str] = []

    async def fake_incr_event_counter(event_type: str) -> int:
        bumped.append(event_type)
        return 9

    monkeypatch.setattr(tracking_service, "get_session", make_get_session(fake_session))
    monkeypatch.setattr(tracking_service, "incr_event_counter", fake_incr_event_counter)

    assert await track_event(user_id="alice", event_type="page_view") == 9

    (event,) = fake_session.added
    assert isinstance(event, Event)
    assert (event.user_id, event.event_type) == ("alice", "page_view")
    assert bumped == ["page_view"]


@pytest.mark.asyncio
async def test_record_purchase_rejects_unknown_product(monkeypatch: pytest.MonkeyPatch, fake_session: FakeSession):
    monkeypatch.setattr(tracking_service, "get_session", make_get_session(fake_session))

    with pytest.raises(InvalidProductError):
        await record_purchase(user_id="alice", product_id="pears", quantity=1)
    assert fake_session.added == []


@pytest.mark.asyncio
async def test_record_purchase_increments_by_quantity(monkeypatch: pytest.MonkeyPatch, fake_session: FakeSession):
    calls: list[tuple[str, int]] = []

    async def fake_incr_product_sales(product_id: str, quantity: int) -> int:
        calls.append((product_id, quantity))
        return 12

    monkeypatch.setattr(tracking_service, "get_session", make_get_session(fake_session))
    monkeypatch.setattr(tracking_service, "incr_product_sales", fake_incr_product_sales)

    assert await record_purchase(user_id="bob", product_id="apples", quantity=3) == 12

    (purchase,) = fake_session.added
    assert isinstance(purchase, Purchase)
    assert (purchase.product_id, purchase.quantity) == ("apples", 3)
    assert calls == [("apples", 3)]


@pytest.mark.asyncio
async def test_get_product_sales_defaults_missing_to_zero(monkeypatch: pytest.MonkeyPatch):
    async def fake_get_counters(keys: list[str]) -> list[str | None]:
        assert keys == ["sales:product:apples", "sales:product:oranges", "sales:product:bananas"]
        return ["4", None, "oops"]

    monkeypatch.setattr(tracking_service, "get_counters", fake_get_counters)

    assert await get_product_sales() == {"apples": 4, "oranges": 0, "bananas": 0}


@pytest.mark.asyncio
async def test_get_product_sales_redis_down_reports_zeros(monkeypatch: pytest.MonkeyPatch):
    async def failing_get_counters(keys: list[str]) -> list[str | None]:
        raise RedisConnectionError("redis down")

    monkeypatch.setattr(tracking_service, "get_counters", failing_get_counters)

    assert await get_product_sales() == {"apples": 0, "oranges": 0, "bananas": 0}


@pytest.mark.asyncio
async def test_track_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, authorized):
    async def fake_track_event(*, user_id: str, event_type: str) -> int:
        return 42

    monkeypatch.setattr(tracking_routes, "track_event", fake_track_event)

    response = await client.post("/track", params={"event": "page_view", "user_id": "alice"}, headers=AUTH)
    assert response.status_code == 200
    assert response.json() == {
        "message": "Event page_view tracked for user alice",
        "event": "page_view",
        "user_id": "alice",
        "count": 42,
    }


@pytest.mark.asyncio
async def test_track_endpoint_missing_params(client: AsyncClient, authorized):
    response = await client.post("/track", params={"event": "page_view"}, headers=AUTH)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_PARAMETERS"


@pytest.mark.asyncio
async def test_track_endpoint_requires_key(client: AsyncClient, authorized):
    response = await client.post("/track", params={"event": "page_view", "user_id": "alice"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_users_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, authorized):
    from datetime import datetime, timezone

    from app.models import User

    async def fake_list_users() -> list[User]:
        return [
            User(user_id="carol", registered_at=datetime(2026, 10, 2, tzinfo=timezone.utc)),
            User(user_id="alice", registered_at=datetime(2026, 10, 1, tzinfo=timezone.utc)),
        ]

    monkeypatch.setattr(tracking_routes, "list_users", fake_list_users)

    response = await client.get("/users", headers=AUTH)
    assert response.status_code == 200
    data = response.json()
    assert [u["user_id"] for u in data] == ["carol", "alice"]
    assert data[0]["registered_at"].startswith("2026-10-02T00:00:00")


@pytest.mark.asyncio
async def test_purchases_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, authorized):
    seen: list[int] = []

    async def fake_record_purchase(*, user_id: str, product_id: str, quantity: int) -> int:
        seen.append(quantity)
        return 10

    monkeypatch.setattr(tracking_routes, "record_purchase", fake_record_purchase)

    response = await client.post(
        "/purchases",
        params={"user_id": "bob", "product_id": "bananas", "quantity": "-3"},
        headers=AUTH,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["quantity"] == 1
    assert body["total_sold"] == 10
    assert body["message"] == "User bob bought 1 of product bananas"
    assert seen == [1]


@pytest.mark.asyncio
async def test_purchases_endpoint_invalid_product(client: AsyncClient, authorized):
    # The real service rejects unknown products before touching any store.
    response = await client.post(
        "/purchases",
        params={"user_id": "bob", "product_id": "pears"},
        headers=AUTH,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PRODUCT"


@pytest.mark.asyncio
async def test_products_endpoint(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, authorized):
    async def fake_get_product_sales() -> dict[str, int]:
        return {"apples": 2, "oranges": 0, "bananas": 7}

    monkeypatch.setattr(tracking_routes, "get_product_sales", fake_get_product_sales)

    response = await client.get("/products", headers=AUTH)
    assert response.status_code == 200
    assert response.json() == {"apples": 2, "oranges": 0, "bananas": 7}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"product_id": "apples"},
        {"user_id": "bob"},
        {"user_id": "  ", "product_id": "apples"},
    ],
)
async def test_purchases_endpoint_missing_params(client: AsyncClient, authorized, params):
    response = await client.post("/purchases", params=params, headers=AUTH)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_PARAMETERS"


@pytest.mark.asyncio
async def test_users_endpoint_empty(client: AsyncClient, monkeypatch: pytest.MonkeyPatch, authorized):
    async def fake_list_users() -> list:
        return []

    monkeypatch.setattr(tracking_routes, "list_users", fake_list_users)

    response = await client.get("/users", headers=AUTH)
    assert response.status_code == 200
    assert response.json() == []
