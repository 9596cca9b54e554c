# tests/integration/test_reservations_router.py

from datetime import datetime, time, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bolerie.core.config import settings
from tests.utils.branch import create_random_branch
from tests.utils.user import create_user_and_get_headers


def _payload(**overrides) -> dict:
    delivery = datetime.now() + timedelta(days=3)
    payload = {
        "customer_name": "Joana Lima",
        "customer_phone": "11988887777",
        "date": (datetime.now() + timedelta(days=2)).isoformat(),
        "delivery_date": delivery.isoformat(),
        "items": [
            {"product_id": 1, "product_name": "Bolo de Morango", "quantity": 2, "price": "50.00"},
            {"product_id": 2, "product_name": "Docinhos", "quantity": 1, "price": "30.00", "size": "Cento"},
        ],
        "payment_method": "pix",
        "has_advance_payment": True,
        "advance_amount": "40.00",
        "advance_payment_method": "pix",
    }
    payload.update(overrides)
    return payload


def _url(branch_id: int, path: str = "") -> str:
    return f"{settings.API_V1_STR}/branches/{branch_id}/reservations{path}"


def test_create_reservation_computes_money_and_legacy_fields(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    # --- Act ---
    response = client.post(_url(branch.id, "/"), json=_payload(), headers=headers)

    # --- Assert ---
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert Decimal(data["total"]) == Decimal("130")
    assert Decimal(data["remaining_amount"]) == Decimal("90")
    # Campos legados derivados dos itens
    assert data["product_id"] == 1
    assert data["product_name"] == "Bolo de Morango"
    assert data["quantity"] == 3
    assert Decimal(data["price"]) == Decimal("50")
    assert [item["product_name"] for item in data["items"]] == ["Bolo de Morango", "Docinhos"]


def test_advance_greater_than_total_is_rejected(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    response = client.post(_url(branch.id, "/"), json=_payload(advance_amount="500"), headers=headers)

    assert response.status_code == 422
    assert client.get(_url(branch.id, "/"), headers=headers).json() == []


def test_reservation_without_items_is_rejected(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    response = client.post(_url(branch.id, "/"), json=_payload(items=[]), headers=headers)

    assert response.status_code == 422


def test_update_items_recomputes_totals_and_legacy_fields(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()

    response = client.put(
        _url(branch.id, f"/{reservation['id']}"),
        json={"items": [{"product_id": 5, "product_name": "Torta de Limão", "quantity": 1, "price": "70"}]},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total"]) == Decimal("70")
    assert Decimal(data["remaining_amount"]) == Decimal("30")
    assert data["product_id"] == 5
    assert data["quantity"] == 1


def test_update_without_advance_resets_amount(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()

    response = client.put(
        _url(branch.id, f"/{reservation['id']}"), json={"has_advance_payment": False}, headers=headers
    )

    data = response.json()
    assert Decimal(data["advance_amount"]) == Decimal("0")
    assert Decimal(data["remaining_amount"]) == Decimal(data["total"])


def test_status_transitions(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()
    status_url = _url(branch.id, f"/{reservation['id']}/status")

    # --- Act & Assert ---
    completed = client.patch(status_url, json={"status": "completed"}, headers=headers)
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"

    # Repetir o mesmo status não é erro
    assert client.patch(status_url, json={"status": "completed"}, headers=headers).status_code == 200

    # Reserva concluída não pode ser cancelada
    assert client.patch(status_url, json={"status": "cancelled"}, headers=headers).status_code == 409


def test_upcoming_lists_only_pending_in_window(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    soon = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()
    far = _payload(date=(datetime.now() + timedelta(days=20)).isoformat())
    client.post(_url(branch.id, "/"), json=far, headers=headers)
    cancelled = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()
    client.patch(_url(branch.id, f"/{cancelled['id']}/status"), json={"status": "cancelled"}, headers=headers)

    response = client.get(_url(branch.id, "/upcoming"), headers=headers)

    assert [r["id"] for r in response.json()] == [soon["id"]]


def test_reservation_for_today_notifies_creator(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    today_noon = datetime.combine(datetime.now().date(), time(12, 0))

    client.post(
        _url(branch.id, "/"),
        json=_payload(date=today_noon.isoformat(), delivery_date=today_noon.isoformat()),
        headers=headers,
    )

    notifications = client.get(f"{settings.API_V1_STR}/notifications/", headers=headers).json()
    assert [n["title"] for n in notifications] == ["Reserva Hoje"]
    assert notifications[0]["link"].startswith("/reservas?id=")


def test_reminder_for_future_delivery_stays_hidden_until_scheduled(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    client.post(_url(branch.id, "/"), json=_payload(), headers=headers)

    # O lembrete "Reserva Amanhã" está agendado para o dia anterior à entrega
    assert client.get(f"{settings.API_V1_STR}/notifications/", headers=headers).json() == []


def test_reservation_receipt_includes_advance(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()

    response = client.get(_url(branch.id, f"/{reservation['id']}/receipt"), headers=headers)

    assert response.status_code == 200
    assert "Adiantamento" in response.text
    assert "R$ 90,00" in response.text


def test_explicit_null_for_required_field_is_rejected(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(), headers=headers).json()

    # --- Act ---
    response = client.put(_url(branch.id, f"/{reservation['id']}"), json={"customer_name": None}, headers=headers)

    # --- Assert ---
    assert response.status_code == 422
    unchanged = client.get(_url(branch.id, f"/{reservation['id']}"), headers=headers).json()
    assert unchanged["customer_name"] == "Joana Lima"


def test_null_for_optional_field_clears_it(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    reservation = client.post(_url(branch.id, "/"), json=_payload(notes="Sem glúten"), headers=headers).json()

    response = client.put(_url(branch.id, f"/{reservation['id']}"), json={"notes": None}, headers=headers)

    assert response.status_code == 200
    assert response.json()["notes"] is None
