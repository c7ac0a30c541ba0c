from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.cart import Cart
from app.models.order import Order, OrderStatus
from app.services.order_service import can_transition


def _fill_cart(client: TestClient, headers: dict, *lines) -> None:
    for product_id, quantity in lines:
        response = client.post("/api/cart", headers=headers, json={"product_id": product_id, "quantity": quantity})
        assert response.status_code == 200


def _place(client: TestClient, headers: dict, payment_method: str = "cash"):
    return client.post("/api/orders", headers=headers, json={"payment_method": payment_method})


def test_empty_cart_order_rejection(client: TestClient, db_session: Session, create_user, auth_headers):
    user = create_user("emptyorder@example.com")

    response = _place(client, auth_headers(user))

    assert response.status_code == 400
    assert response.json()["message"] == "Cart is empty"
    assert db_session.query(Order).count() == 0


def test_place_order_snapshots_cart_and_deletes_it(
    client: TestClient, db_session: Session, create_user, create_product, auth_headers
):
    user = create_user("placeorder@example.com")
    cake_a = create_product("Cake A", price=100)
    cake_b = create_product("Cake B", price=250)
    headers = auth_headers(user)
    _fill_cart(client, headers, (cake_a.id, 2), (cake_b.id, 1))

    response = _place(client, headers, "Card")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "confirmed"
    assert data["total"] == 450

    db_session.expire_all()
    order = db_session.query(Order).filter(Order.id == data["order_id"]).one()
    assert order.user_id == user.id
    assert order.payment_method.value == "card"
    assert [(item.product_id, item.quantity, item.price) for item in order.items] == [
        (cake_a.id, 2, 100),
        (cake_b.id, 1, 250),
    ]
    assert db_session.query(Cart).filter(Cart.user_id == user.id).count() == 0

    cart = client.get("/api/cart", headers=headers).json()["data"]
    assert cart["items"] == []


def test_invalid_payment_method_keeps_cart(
    client: TestClient, db_session: Session, create_user, create_product, auth_headers
):
    user = create_user("badmethod@example.com")
    product = create_product("Method Cake")
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 1))

    response = _place(client, headers, "bitcoin")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment method must be one of: cash, card"
    assert db_session.query(Order).count() == 0
    assert len(client.get("/api/cart", headers=headers).json()["data"]["items"]) == 1


def test_order_snapshot_survives_product_deletion(
    client: TestClient, create_user, create_product, auth_headers
):
    admin = create_user("snapshot.admin@example.com", is_admin=True)
    user = create_user("snapshot@example.com")
    product = create_product("Vanishing Cake", price=180)
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 2))
    order_id = _place(client, headers).json()["data"]["order_id"]

    deleted = client.delete(f"/api/admin/products/{product.id}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    response = client.get(f"/api/orders/{order_id}", headers=headers)
    assert response.status_code == 200
    items = response.json()["data"]["items"]
    assert items == [
        {"product_id": product.id, "product_name": "Vanishing Cake", "quantity": 2, "price": 180}
    ]
    assert response.json()["data"]["total"] == 360


def test_list_orders_newest_first_and_own_only(
    client: TestClient, create_user, create_product, auth_headers
):
    ann = create_user("ann.orders@example.com")
    bob = create_user("bob.orders@example.com")
    product = create_product("History Cake", price=100)
    ann_headers = auth_headers(ann)

    _fill_cart(client, ann_headers, (product.id, 1))
    first_id = _place(client, ann_headers).json()["data"]["order_id"]
    _fill_cart(client, ann_headers, (product.id, 3))
    second_id = _place(client, ann_headers).json()["data"]["order_id"]

    response = client.get("/api/orders", headers=ann_headers)
    assert response.status_code == 200
    assert [order["id"] for order in response.json()["data"]] == [second_id, first_id]

    assert client.get("/api/orders", headers=auth_headers(bob)).json()["data"] == []
    assert client.get(f"/api/orders/{first_id}", headers=auth_headers(bob)).status_code == 404


def test_order_detail_includes_status_history(client: TestClient, create_user, create_product, auth_headers):
    user = create_user("history@example.com")
    product = create_product("Timeline Cake")
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 1))
    order_id = _place(client, headers).json()["data"]["order_id"]

    response = client.get(f"/api/orders/{order_id}", headers=headers)

    history = response.json()["data"]["status_history"]
    assert len(history) == 1
    assert history[0]["old_status"] is None
    assert history[0]["new_status"] == "confirmed"
    assert history[0]["reason"] == "placed"


def test_non_admin_cannot_change_status(
    client: TestClient, db_session: Session, create_user, create_product, auth_headers
):
    user = create_user("nonadmin.status@example.com")
    product = create_product("Guarded Cake")
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 1))
    order_id = _place(client, headers).json()["data"]["order_id"]

    response = client.put(f"/api/admin/orders/{order_id}", headers=headers, json={"status": "completed"})

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required"
    db_session.expire_all()
    assert db_session.query(Order).filter(Order.id == order_id).one().status == OrderStatus.CONFIRMED


def test_admin_status_update_and_terminal_states(
    client: TestClient, create_user, create_product, auth_headers
):
    admin = create_user("status.admin@example.com", is_admin=True)
    user = create_user("status.user@example.com")
    product = create_product("Status Cake")
    headers = auth_headers(user)
    admin_headers = auth_headers(admin)
    _fill_cart(client, headers, (product.id, 1))
    order_id = _place(client, headers).json()["data"]["order_id"]

    invalid = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "shipped"})
    assert invalid.status_code == 400

    same = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "confirmed"})
    assert same.status_code == 409

    backwards = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "pending"})
    assert backwards.status_code == 409

    paid = client.post("/api/payments", headers=headers, json={"order_id": order_id, "method": "cash"})
    assert paid.status_code == 201

    completed = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "COMPLETED"})
    assert completed.status_code == 200
    assert completed.json()["data"]["status"] == "completed"

    cancelled = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "cancelled"})
    assert cancelled.status_code == 409
    assert cancelled.json()["message"] == "Cannot move order from completed to cancelled"


def test_admin_cannot_mark_unpaid_order_paid_or_completed(
    client: TestClient, db_session: Session, create_user, create_product, auth_headers
):
    admin = create_user("unpaid.status.admin@example.com", is_admin=True)
    user = create_user("unpaid.status.user@example.com")
    product = create_product("Unpaid Status Cake", price=220)
    headers = auth_headers(user)
    admin_headers = auth_headers(admin)
    _fill_cart(client, headers, (product.id, 1))
    order_id = _place(client, headers).json()["data"]["order_id"]

    paid = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "paid"})
    assert paid.status_code == 409
    assert paid.json()["message"] == "Cannot move order to paid before a payment is recorded"

    completed = client.put(f"/api/admin/orders/{order_id}", headers=admin_headers, json={"status": "completed"})
    assert completed.status_code == 409

    db_session.expire_all()
    assert db_session.query(Order).filter(Order.id == order_id).one().status == OrderStatus.CONFIRMED

    payment = client.post("/api/payments", headers=headers, json={"order_id": order_id, "method": "cash"})
    assert payment.status_code == 201
    assert client.get(f"/api/payments/{order_id}", headers=headers).json()["data"]["amount"] == 220


def test_second_place_sees_empty_cart(
    client: TestClient, db_session: Session, create_user, create_product, auth_headers
):
    user = create_user("doubleplace@example.com")
    product = create_product("Once Cake", price=90)
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 2))

    first = _place(client, headers)
    second = _place(client, headers)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["message"] == "Cart is empty"
    assert db_session.query(Order).filter(Order.user_id == user.id).count() == 1


def test_failed_commit_during_place_rolls_back(
    client: TestClient, db_session: Session, monkeypatch, create_user, create_product, auth_headers
):
    user = create_user("failplace@example.com")
    product = create_product("Fragile Cake", price=75)
    headers = auth_headers(user)
    _fill_cart(client, headers, (product.id, 2))

    def failing_commit():
        db_session.flush()
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(db_session, "commit", failing_commit)
    response = _place(client, headers)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    db_session.expire_all()
    assert db_session.query(Order).count() == 0
    cart = db_session.query(Cart).filter(Cart.user_id == user.id).one()
    assert [(item.product_id, item.quantity) for item in cart.items] == [(product.id, 2)]
    assert cart.total == 150


def test_admin_status_update_unknown_order(client: TestClient, create_user, auth_headers):
    admin = create_user("missing.order.admin@example.com", is_admin=True)

    response = client.put("/api/admin/orders/999", headers=auth_headers(admin), json={"status": "cancelled"})

    assert response.status_code == 404


def test_transition_rules():
    assert can_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED)
    assert can_transition(OrderStatus.CONFIRMED, OrderStatus.PAID)
    assert can_transition(OrderStatus.PAID, OrderStatus.COMPLETED)
    assert can_transition(OrderStatus.PAID, OrderStatus.CANCELLED)
    assert not can_transition(OrderStatus.PAID, OrderStatus.CONFIRMED)
    assert not can_transition(OrderStatus.CONFIRMED, OrderStatus.CONFIRMED)
    assert not can_transition(OrderStatus.CANCELLED, OrderStatus.CONFIRMED)
    assert not can_transition(OrderStatus.COMPLETED, OrderStatus.CANCELLED)
