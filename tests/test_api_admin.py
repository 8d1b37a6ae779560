from datetime import timedelta
from decimal import Decimal

from conftest import utcnow


async def test_pending_import_and_reports(client, seed):
    ana = await seed.sales_rep("Ana")
    bruno = await seed.sales_rep("Bruno")
    soap = await seed.product("Soap")
    now = utcnow()
    await seed.order(ana, Decimal(100), created_at=now - timedelta(minutes=2), items=[(soap, 10)], mobile_order_id="m1")
    kept = await seed.order(bruno, Decimal(75), created_at=now - timedelta(minutes=1), mobile_order_id="m2")

    pending = (await client.get("/api/v1/mobile-import/pending")).json()
    assert Decimal(pending["total_value"]) == Decimal(175)
    assert [(g["sales_rep_name"], g["count"]) for g in pending["groups"]] == [("Bruno", 1), ("Ana", 1)]

    resp = await client.post(
        "/api/v1/mobile-import/import",
        json={"sales_rep_ids": [str(ana.id)], "operator": "maria"},
    )
    assert resp.status_code == 200
    report = resp.json()
    assert report["summary"]["total_orders"] == 1
    assert report["operator"] == "maria"

    pending = (await client.get("/api/v1/mobile-import/pending")).json()
    assert [o["id"] for o in pending["orders"]] == [str(kept.id)]

    history = (await client.get("/api/v1/mobile-import/history")).json()
    assert [(o["mobile_order_id"], o["import_status"], o["imported_by"]) for o in history] == [
        ("m1", "imported", "maria"),
    ]

    reports = (await client.get("/api/v1/mobile-import/reports")).json()
    assert [r["id"] for r in reports] == [report["id"]]
    stored = (await client.get(f"/api/v1/mobile-import/reports/{report['id']}")).json()
    assert stored["summary"] == report["summary"]
    text = (await client.get(f"/api/v1/mobile-import/reports/{report['id']}/text")).text
    assert "MOBILE ORDERS IMPORT REPORT" in text


async def test_reject_selected_orders(client, seed):
    ana = await seed.sales_rep("Ana")
    order = await seed.order(ana, Decimal(10), mobile_order_id="m1")

    resp = await client.post("/api/v1/mobile-import/reject", json={"order_ids": [str(order.id)]})

    assert resp.status_code == 200
    assert resp.json()["operation_type"] == "reject"
    history = (await client.get("/api/v1/mobile-import/history")).json()
    assert [o["import_status"] for o in history] == ["rejected"]


async def test_import_without_selection_is_a_bad_request(client, seed):
    await seed.order(await seed.sales_rep(), Decimal(10))

    resp = await client.post("/api/v1/mobile-import/import", json={"order_ids": []})

    assert resp.status_code == 400
    assert resp.json() == {"detail": "No orders selected"}


async def test_sync_update_endpoints(client, seed):
    created = await client.post("/api/v1/sync-updates", json={"data_types": ["products"]})
    assert created.status_code == 200
    update_id = created.json()["id"]

    active = (await client.get("/api/v1/sync-updates/active")).json()
    assert [u["id"] for u in active] == [update_id]
    assert active[0]["metadata"]["created_from"] == "desktop"

    consumed = await client.post(f"/api/v1/sync-updates/{update_id}/consume", json={"consumed_by": "rep"})
    assert consumed.json() == {"success": True}

    await seed.sync_update(is_active=False, age=timedelta(hours=30))
    reactivated = await client.post("/api/v1/sync-updates/reactivate-orphaned", json={"older_than_hours": 24})
    assert reactivated.json() == {"reactivated": 1}

    stats = (await client.get("/api/v1/sync-updates/stats")).json()
    assert stats == {"active": 1, "consumed": 1, "orphaned": 0}
    assert len((await client.get("/api/v1/sync-updates")).json()) == 2


async def test_create_sync_update_without_types(client):
    resp = await client.post("/api/v1/sync-updates", json={"data_types": []})

    assert resp.status_code == 400


async def test_token_lifecycle(client, seed):
    ana = await seed.sales_rep()

    created = await client.post(f"/api/v1/sales-reps/{ana.id}/tokens", json={"name": "Ana's phone", "expires_days": 30})
    assert created.status_code == 200
    token = created.json()
    assert token["expires_at"]

    headers = {"Authorization": f"Bearer {token['token']}"}
    assert (await client.get("/functions/mobile-sync/get-products", headers=headers)).status_code == 200

    listed = (await client.get(f"/api/v1/sales-reps/{ana.id}/tokens")).json()
    assert [t["id"] for t in listed] == [token["id"]]

    revoked = await client.delete(f"/api/v1/tokens/{token['id']}")
    assert revoked.json()["is_active"] is False
    assert (await client.get("/functions/mobile-sync/get-products", headers=headers)).status_code == 401


async def test_token_for_unknown_rep(client):
    resp = await client.post("/api/v1/sales-reps/00000000-0000-0000-0000-000000000000/tokens", json={"name": "x"})

    assert resp.status_code == 404
