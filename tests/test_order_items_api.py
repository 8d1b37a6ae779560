from decimal import Decimal
from uuid import uuid4


async def seed_admin_order(seed):
    soap = await seed.product("Soap", price=Decimal("10"))
    rice = await seed.product("Rice", unit="KG", price=Decimal("5"))
    order = await seed.order(
        total=Decimal("20"),
        source_project="admin",
        import_status=None,
        items=[(soap, 2)],
    )
    return order, soap, rice


async def test_get_order_with_items(client, seed):
    order, soap, _ = await seed_admin_order(seed)

    resp = await client.get(f"/api/v1/orders/{order.id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == order.code
    assert [i["product_name"] for i in body["items"]] == ["Soap"]


async def test_adding_same_product_merges_and_updates_total(client, seed):
    order, soap, _ = await seed_admin_order(seed)

    resp = await client.post(
        f"/api/v1/orders/{order.id}/items",
        json={"product_id": str(soap.id), "quantity": "3", "price": "12"},
    )

    assert resp.status_code == 200
    line = resp.json()
    assert Decimal(line["quantity"]) == Decimal(5)
    assert Decimal(line["total"]) == Decimal(60)

    body = (await client.get(f"/api/v1/orders/{order.id}")).json()
    assert len(body["items"]) == 1
    assert Decimal(body["total"]) == Decimal(60)


async def test_new_product_gets_a_new_line(client, seed):
    order, _, rice = await seed_admin_order(seed)

    resp = await client.post(
        f"/api/v1/orders/{order.id}/items",
        json={"product_id": str(rice.id), "quantity": "2", "price": "5"},
    )

    assert resp.status_code == 200
    assert resp.json()["unit"] == "KG"
    items = (await client.get(f"/api/v1/orders/{order.id}/items")).json()
    assert [i["product_name"] for i in items] == ["Soap", "Rice"]
    total = (await client.get(f"/api/v1/orders/{order.id}")).json()["total"]
    assert Decimal(total) == Decimal(30)


async def test_remove_product(client, seed):
    order, soap, _ = await seed_admin_order(seed)

    resp = await client.delete(f"/api/v1/orders/{order.id}/items/{soap.id}")

    assert resp.status_code == 200
    assert [i["product_name"] for i in resp.json()] == ["Soap"]
    body = (await client.get(f"/api/v1/orders/{order.id}")).json()
    assert body["items"] == []
    assert Decimal(body["total"]) == Decimal(0)


async def test_invalid_quantity_is_rejected(client, seed):
    order, soap, _ = await seed_admin_order(seed)

    resp = await client.post(
        f"/api/v1/orders/{order.id}/items",
        json={"product_id": str(soap.id), "quantity": "0", "price": "10"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid item data"}


async def test_unknown_order_product_and_line(client, seed):
    order, soap, rice = await seed_admin_order(seed)

    missing_order = await client.get(f"/api/v1/orders/{uuid4()}")
    missing_product = await client.post(
        f"/api/v1/orders/{order.id}/items",
        json={"product_id": str(uuid4()), "quantity": "1", "price": "1"},
    )
    missing_line = await client.delete(f"/api/v1/orders/{order.id}/items/{rice.id}")

    assert missing_order.status_code == 404
    assert missing_product.status_code == 404
    assert missing_line.json() == {"detail": "Item not found for removal"}


async def test_repeated_operation_id_conflicts(client, seed):
    order, soap, _ = await seed_admin_order(seed)
    payload = {"product_id": str(soap.id), "quantity": "1", "price": "10", "operation_id": "tap-1"}

    first = await client.post(f"/api/v1/orders/{order.id}/items", json=payload)
    second = await client.post(f"/api/v1/orders/{order.id}/items", json=payload)

    assert first.status_code == 200
    assert second.status_code == 409
    items = (await client.get(f"/api/v1/orders/{order.id}/items")).json()
    assert Decimal(items[0]["quantity"]) == Decimal(3)


async def test_recalculate_applies_discount(client, seed, db):
    order, _, _ = await seed_admin_order(seed)
    order.discount = Decimal("5")
    order.total = Decimal("0")
    await db.commit()

    resp = await client.post(f"/api/v1/orders/{order.id}/recalculate")

    assert resp.status_code == 200
    assert Decimal(resp.json()["total"]) == Decimal(15)
