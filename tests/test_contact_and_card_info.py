from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.card_info import CardInfo
from app.models.contact_message import ContactMessage, ContactMessageStatus
from app.services.card_info_service import CardInfoService


def _contact(client: TestClient, **overrides):
    body = {
        "name": "Curious Customer",
        "email": "curious@example.com",
        "phone": "+91 98765 43210",
        "message": "Do you deliver on Sundays?",
    }
    body.update(overrides)
    return client.post("/api/contact", json=body)


def test_contact_message_saved(client: TestClient, db_session: Session):
    response = _contact(client)

    assert response.status_code == 201
    message = db_session.query(ContactMessage).filter(ContactMessage.id == response.json()["data"]["id"]).one()
    assert message.status == ContactMessageStatus.NEW
    assert message.message == "Do you deliver on Sundays?"


def test_contact_message_is_sanitized(client: TestClient, db_session: Session):
    response = _contact(client, message="<script>alert(1)</script>Hello <b>there</b>")

    assert response.status_code == 201
    stored = db_session.query(ContactMessage).one()
    assert "<" not in stored.message
    assert "Hello there" in stored.message


def test_contact_message_validation(client: TestClient, db_session: Session):
    assert _contact(client, email="not-an-email").status_code == 400
    assert _contact(client, message="   ").status_code == 400
    assert _contact(client, message="x" * 2001).status_code == 400
    assert _contact(client, phone="call me").status_code == 400
    assert db_session.query(ContactMessage).count() == 0


def test_admin_reads_contact_messages(client: TestClient, create_user, auth_headers):
    admin = create_user("inbox.admin@example.com", is_admin=True)
    first_id = _contact(client, message="First").json()["data"]["id"]
    second_id = _contact(client, message="Second").json()["data"]["id"]
    headers = auth_headers(admin)

    listed = client.get("/api/admin/contact-messages", headers=headers).json()["data"]
    assert [message["id"] for message in listed] == [second_id, first_id]

    marked = client.put(f"/api/admin/contact-messages/{first_id}/read", headers=headers)
    assert marked.status_code == 200
    assert marked.json()["data"]["status"] == "read"

    missing = client.put("/api/admin/contact-messages/999/read", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Message not found"


def test_card_info_saved_masked_and_upserted(
    client: TestClient, db_session: Session, create_user, auth_headers
):
    user = create_user("cardinfo@example.com", name="Card Owner")
    headers = auth_headers(user)

    first = client.post(
        "/api/card-info", headers=headers, json={"card_number": "4111-1111-1111-4242", "expiry_date": "08/27"}
    )
    assert first.status_code == 200
    assert first.json()["data"]["masked_card"] == "****-****-****-4242"
    assert first.json()["data"]["user_name"] == "Card Owner"

    second = client.post(
        "/api/card-info", headers=headers, json={"card_number": "5500000000000004", "expiry_date": "01/2030"}
    )
    assert second.status_code == 200

    rows = db_session.query(CardInfo).filter(CardInfo.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].card_last4 == "0004"
    assert rows[0].expiry == "01/2030"


def test_card_info_rejects_bad_input(client: TestClient, db_session: Session, create_user, auth_headers):
    user = create_user("badcardinfo@example.com")

    response = client.post(
        "/api/card-info", headers=auth_headers(user), json={"card_number": "12ab", "expiry_date": "08/27"}
    )

    assert response.status_code == 400
    assert db_session.query(CardInfo).count() == 0
    assert client.post("/api/card-info", json={"card_number": "4111111111111111", "expiry_date": "08/27"}).status_code == 401


def test_admin_lists_card_info(client: TestClient, create_user, auth_headers):
    admin = create_user("cards.admin@example.com", is_admin=True)
    user = create_user("cards.customer@example.com")
    client.post(
        "/api/card-info", headers=auth_headers(user), json={"card_number": "4111111111111111", "expiry_date": "08/27"}
    )

    response = client.get("/api/admin/card-info", headers=auth_headers(admin))

    assert response.status_code == 200
    cards = response.json()["data"]
    assert len(cards) == 1
    assert cards[0]["masked_card"] == "****-****-****-1111"
    assert "card_number" not in cards[0]
    assert client.get("/api/admin/card-info", headers=auth_headers(user)).status_code == 403


def test_card_info_refreshes_copied_user_fields(
    client: TestClient, db_session: Session, create_user, auth_headers
):
    user = create_user("renamed.card@example.com", name="Old Name")
    headers = auth_headers(user)
    body = {"card_number": "4111111111111111", "expiry_date": "08/27"}
    assert client.post("/api/card-info", headers=headers, json=body).status_code == 200

    user.name = "New Name"
    user.email = "renamed.card.new@example.com"
    db_session.commit()

    response = client.post("/api/card-info", headers=headers, json=body)

    assert response.status_code == 200
    assert response.json()["data"]["user_name"] == "New Name"
    assert response.json()["data"]["user_email"] == "renamed.card.new@example.com"
    row = db_session.query(CardInfo).filter(CardInfo.user_id == user.id).one()
    assert row.user_name == "New Name"


def test_card_info_insert_conflict_becomes_update(
    client: TestClient, db_session: Session, monkeypatch, create_user, auth_headers
):
    user = create_user("racing.card@example.com", name="Racer")
    db_session.add(
        CardInfo(user_id=user.id, user_name="Racer", user_email=user.email, card_last4="1111", expiry="08/27")
    )
    db_session.commit()
    # The lookup misses, as if the other insert landed after it
    monkeypatch.setattr(CardInfoService, "_find", lambda db, user_id: None)

    response = client.post(
        "/api/card-info", headers=auth_headers(user), json={"card_number": "5500000000000004", "expiry_date": "01/2030"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["masked_card"] == "****-****-****-0004"
    db_session.expire_all()
    rows = db_session.query(CardInfo).filter(CardInfo.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].card_last4 == "0004"
    assert rows[0].expiry == "01/2030"
