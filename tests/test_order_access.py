import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from shared.config.database import AsyncSessionLocal
from services.account_service.models import OrderSummary
from services.order_service.models import Order
from services.order_service.repository import OrderRepository
from conftest import auth_headers


@pytest.fixture
async def two_customers_orders(make_user, make_book, place_order):
    book = await make_book(price=8.0)
    alice = await make_user()
    bob = await make_user()
    alice_order = (await place_order(auth_headers(alice), [(book, 1)])).json()["order"]
    bob_order = (await place_order(auth_headers(bob), [(book, 3)])).json()["order"]
    return alice, alice_order, bob, bob_order


async def force_status(order_id: int, status: str) -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(update(Order).where(Order.id == order_id).values(status=status))
        await session.commit()


async def summaries_for(user_id: int) -> list[tuple[int, str]]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(OrderSummary.order_id, OrderSummary.status).where(OrderSummary.user_id == user_id)
        )
        return [tuple(row) for row in result.all()]


async def test_admin_lists_every_order_with_details(client, admin_headers, two_customers_orders):
    alice, alice_order, bob, bob_order = two_customers_orders

    resp = await client.get("/orders/", headers=admin_headers)

    assert resp.status_code == 200
    orders = resp.json()["orders"]
    assert {o["id"] for o in orders} == {alice_order["id"], bob_order["id"]}
    by_id = {o["id"]: o for o in orders}
    assert by_id[alice_order["id"]]["user"]["email"] == alice.email
    assert by_id[bob_order["id"]]["items"][0]["book"]["price"] == 8.0


async def test_customer_lists_only_own_orders(client, two_customers_orders):
    alice, alice_order, _, _ = two_customers_orders

    resp = await client.get("/orders/", headers=auth_headers(alice))

    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()["orders"]] == [alice_order["id"]]
    assert resp.json()["orders"][0]["user"]["id"] == alice.id


async def test_customer_listing_skips_summaries_of_deleted_orders(client, admin_headers, two_customers_orders):
    alice, alice_order, _, _ = two_customers_orders
    async with AsyncSessionLocal() as session:
        session.add(OrderSummary(user_id=alice.id, order_id=777777, status="ORDER_RECEIVED"))
        await session.commit()

    resp = await client.get("/orders/", headers=auth_headers(alice))

    assert [o["id"] for o in resp.json()["orders"]] == [alice_order["id"]]


async def test_get_order_is_admin_only(client, admin_headers, two_customers_orders):
    alice, alice_order, _, _ = two_customers_orders

    as_admin = await client.get(f"/orders/{alice_order['id']}", headers=admin_headers)
    as_owner = await client.get(f"/orders/{alice_order['id']}", headers=auth_headers(alice))

    assert as_admin.status_code == 200
    assert as_admin.json()["order"]["id"] == alice_order["id"]
    assert as_owner.status_code == 403
    assert as_owner.json() == {"success": False, "message": "Unauthorized: Only admins can view orders"}


async def test_get_missing_order_is_not_found(client, admin_headers):
    resp = await client.get("/orders/31337", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Order not found"}


async def test_owner_cancels_order(client, two_customers_orders):
    alice, alice_order, _, _ = two_customers_orders

    resp = await client.patch(f"/orders/{alice_order['id']}/cancel", headers=auth_headers(alice))

    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "CANCELLED"
    assert await summaries_for(alice.id) == [(alice_order["id"], "CANCELLED")]


async def test_other_account_may_cancel_but_owner_summary_is_untouched(client, two_customers_orders):
    alice, alice_order, bob, _ = two_customers_orders

    resp = await client.patch(f"/orders/{alice_order['id']}/cancel", headers=auth_headers(bob))

    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "CANCELLED"
    assert await summaries_for(alice.id) == [(alice_order["id"], "ORDER_RECEIVED")]


@pytest.mark.parametrize("status", ["SHIPPED", "DELIVERED"])
async def test_shipped_orders_cannot_be_cancelled(client, admin_headers, two_customers_orders, status):
    alice, alice_order, _, _ = two_customers_orders
    await force_status(alice_order["id"], status)

    resp = await client.patch(f"/orders/{alice_order['id']}/cancel", headers=auth_headers(alice))

    assert resp.status_code == 400
    assert resp.json()["message"] == "Order cannot be canceled after it has been shipped"
    current = (await client.get(f"/orders/{alice_order['id']}", headers=admin_headers)).json()["order"]
    assert current["status"] == status
    assert await summaries_for(alice.id) == [(alice_order["id"], "ORDER_RECEIVED")]


@pytest.mark.parametrize("status", ["PREPARING", "COMPLETED", "REFUNDED", "CANCELLED"])
async def test_any_other_status_can_be_cancelled(client, two_customers_orders, status):
    alice, alice_order, _, _ = two_customers_orders
    await force_status(alice_order["id"], status)

    resp = await client.patch(f"/orders/{alice_order['id']}/cancel", headers=auth_headers(alice))

    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "CANCELLED"


async def test_cancel_missing_order(client, customer_headers):
    resp = await client.patch("/orders/31337/cancel", headers=customer_headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Order not found"


async def test_cancel_by_unknown_account(client, two_customers_orders):
    _, alice_order, _, _ = two_customers_orders
    headers = auth_headers(type("Ghost", (), {"id": 999999, "role": "USER"})())

    resp = await client.patch(f"/orders/{alice_order['id']}/cancel", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


async def test_admin_deletes_order_and_summary(client, admin_headers, two_customers_orders):
    alice, alice_order, _, bob_order = two_customers_orders

    resp = await client.delete(f"/orders/{alice_order['id']}", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Order deleted successfully"}
    assert (await client.get(f"/orders/{alice_order['id']}", headers=admin_headers)).status_code == 404
    assert await summaries_for(alice.id) == []
    remaining = (await client.get("/orders/", headers=admin_headers)).json()["orders"]
    assert [o["id"] for o in remaining] == [bob_order["id"]]


async def test_delete_is_admin_only(client, two_customers_orders):
    alice, alice_order, _, _ = two_customers_orders

    resp = await client.delete(f"/orders/{alice_order['id']}", headers=auth_headers(alice))

    assert resp.status_code == 403
    assert await summaries_for(alice.id) == [(alice_order["id"], "ORDER_RECEIVED")]


async def test_delete_missing_order(client, admin_headers):
    resp = await client.delete("/orders/31337", headers=admin_headers)

    assert resp.status_code == 404


async def test_store_failure_is_a_generic_server_error(client, admin_headers, monkeypatch):
    async def broken(db):
        raise SQLAlchemyError("connection reset by peer")

    monkeypatch.setattr(OrderRepository, "get_all_orders", staticmethod(broken))

    resp = await client.get("/orders/", headers=admin_headers)

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server error"}
