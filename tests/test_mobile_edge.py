from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select

from app.db.models.orders import Order
from app.db.models.sync_logs import SyncLog
from conftest import utcnow


def mobile_order(**overrides):
    payload = {
        "customer_id": str(uuid4()),
        "customer_name": "Corner Shop",
        "sales_rep_name": "Ana",
        "total": "30",
        "payment_method": "cash",
        "mobile_order_id": "local-1",
        "items": [
            {"product_name": "Soap", "product_code": 1, "quantity": "3", "unit_price": "10"},
        ],
    }
    payload.update(overrides)
    return payload


def sync_order(local_id, quantity=3):
    return {
        "id": local_id,
        "customerId": str(uuid4()),
        "customerName": "Corner Shop",
        "total": str(10 * quantity),
        "items": [
            {"productName": "Soap", "productCode": 1, "quantity": str(quantity), "unitPrice": "10"},
        ],
    }


async def test_mobile_order_requires_a_token(client):
    resp = await client.post("/functions/mobile-orders", json=mobile_order())

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Authorization token required"}


async def test_unknown_expired_or_revoked_tokens_are_refused(client, seed, auth_headers):
    ana = await seed.sales_rep()
    expired = await seed.token(ana, expires_at=utcnow() - timedelta(days=1))
    revoked = await seed.token(ana, is_active=False)
    inactive_rep = await seed.token(await seed.sales_rep("Gone", active=False))

    for headers in (
        {"Authorization": "Bearer nope"},
        auth_headers(expired),
        auth_headers(revoked),
        auth_headers(inactive_rep),
    ):
        resp = await client.post("/functions/mobile-orders", json=mobile_order(), headers=headers)
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Invalid or expired token"}


async def test_invalid_order_data(client, seed, auth_headers):
    token = await seed.token(await seed.sales_rep())

    no_customer = await client.post("/functions/mobile-orders", json=mobile_order(customer_id=None), headers=auth_headers(token))
    no_items = await client.post("/functions/mobile-orders", json=mobile_order(items=[]), headers=auth_headers(token))
    garbage = await client.post("/functions/mobile-orders", json={"items": "x"}, headers=auth_headers(token))

    for resp in (no_customer, no_items, garbage):
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid order data"}


async def test_other_methods_are_not_allowed(client):
    resp = await client.get("/functions/mobile-orders")

    assert resp.status_code == 405
    assert resp.json()["success"] is False


async def test_mobile_order_lands_in_the_import_queue(client, seed, auth_headers, session_factory):
    ana = await seed.sales_rep()
    token = await seed.token(ana)

    resp = await client.post("/functions/mobile-orders", json=mobile_order(), headers=auth_headers(token))

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True

    async with session_factory() as session:
        order = (await session.execute(select(Order))).scalar_one()
        logs = (await session.execute(select(SyncLog))).scalars().all()
    assert str(order.id) == body["orderId"]
    assert order.sales_rep_id == ana.id
    assert (order.source_project, order.import_status, order.status) == ("mobile", "pending", "pending")
    assert order.mobile_order_id == "local-1"
    assert [(i.unit, i.total) for i in order.items] == [("UN", Decimal(30))]
    assert [(log.event_type, log.data_type) for log in logs] == [("upload", "orders")]

    pending = (await client.get("/api/v1/mobile-import/pending")).json()
    assert [o["id"] for o in pending["orders"]] == [body["orderId"]]


async def test_get_customers_returns_active_customers_of_the_rep(client, seed, auth_headers):
    ana = await seed.sales_rep("Ana")
    bruno = await seed.sales_rep("Bruno")
    await seed.customer(ana, "Zeta Market")
    await seed.customer(ana, "Alpha Store")
    await seed.customer(ana, "Closed Shop", active=False)
    await seed.customer(bruno, "Other Store")
    token = await seed.token(ana)

    resp = await client.get("/functions/mobile-sync/get-customers", headers=auth_headers(token))

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["timestamp"]
    assert [c["name"] for c in body["data"]] == ["Alpha Store", "Zeta Market"]


async def test_catalog_pulls(client, seed, auth_headers):
    ana = await seed.sales_rep("Ana")
    await seed.sales_rep("Gone", active=False)
    await seed.product("Soap")
    await seed.product("Old", active=False)
    token = await seed.token(ana)

    products = (await client.get("/functions/mobile-sync/get-products", headers=auth_headers(token))).json()
    reps = (await client.get("/functions/mobile-sync/get-sales-reps", headers=auth_headers(token))).json()

    assert [p["name"] for p in products["data"]] == ["Soap"]
    assert [r["name"] for r in reps["data"]] == ["Ana"]


async def test_get_orders_and_sync_updates(client, seed, auth_headers):
    ana = await seed.sales_rep("Ana")
    soap = await seed.product("Soap")
    await seed.order(ana, Decimal(10), items=[(soap, 1)])
    await seed.order(await seed.sales_rep("Bruno"), Decimal(20))
    await seed.sync_update(["products"])
    await seed.sync_update(["customers"], is_active=False, completed_at=utcnow())
    token = await seed.token(ana)

    orders = (await client.get("/functions/mobile-sync/get-orders", headers=auth_headers(token))).json()
    updates = (await client.get("/functions/mobile-sync/get-sync-updates", headers=auth_headers(token))).json()

    assert [len(o["items"]) for o in orders["data"]] == [1]
    assert [u["data_types"] for u in updates["data"]] == [["products"]]


async def test_sync_orders_upserts_by_local_id(client, seed, auth_headers, session_factory):
    ana = await seed.sales_rep()
    token = await seed.token(ana)

    first = await client.post(
        "/functions/mobile-sync/sync-orders",
        json={"salesRepId": str(ana.id), "deviceId": "dev-1", "orders": [sync_order("local-1")]},
        headers=auth_headers(token),
    )
    again = await client.post(
        "/functions/mobile-sync/sync-orders",
        json={"deviceId": "dev-1", "orders": [sync_order("local-1", quantity=4)]},
        headers=auth_headers(token),
    )

    assert first.status_code == again.status_code == 200
    processed = first.json()["processed"][0]
    assert processed["localId"] == "local-1"
    assert processed["status"] == "synced"
    assert again.json()["processed"][0]["serverId"] == processed["serverId"]

    async with session_factory() as session:
        order = (await session.execute(select(Order))).scalar_one()
    assert order.device_id == "dev-1"
    assert [i.quantity for i in order.items] == [Decimal(4)]


async def test_sync_orders_reports_already_imported_orders(client, seed, auth_headers):
    ana = await seed.sales_rep()
    await seed.order(ana, Decimal(10), source_project="admin", import_status="imported", mobile_order_id="local-1")
    token = await seed.token(ana)

    resp = await client.post(
        "/functions/mobile-sync/sync-orders",
        json={"orders": [sync_order("local-1"), sync_order("local-2")]},
        headers=auth_headers(token),
    )

    assert [(p["localId"], p["status"]) for p in resp.json()["processed"]] == [
        ("local-1", "error"),
        ("local-2", "synced"),
    ]


async def test_sync_orders_for_another_rep_is_refused(client, seed, auth_headers):
    token = await seed.token(await seed.sales_rep())

    resp = await client.post(
        "/functions/mobile-sync/sync-orders",
        json={"salesRepId": str(uuid4()), "orders": [sync_order("local-1")]},
        headers=auth_headers(token),
    )

    assert resp.status_code == 401
    assert resp.json()["success"] is False


async def test_consume_sync_update(client, seed, auth_headers):
    token = await seed.token(await seed.sales_rep())
    update = await seed.sync_update()

    consumed = await client.post(
        "/functions/mobile-sync/consume-sync-update",
        json={"updateId": str(update.id), "deviceId": "dev-1"},
        headers=auth_headers(token),
    )
    missing = await client.post(
        "/functions/mobile-sync/consume-sync-update",
        json={"updateId": str(uuid4())},
        headers=auth_headers(token),
    )

    assert consumed.json() == {"success": True}
    assert missing.json() == {"success": False}
