# tests/integration/test_ingredients_router.py

from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bolerie.core.config import settings
from tests.utils.branch import create_random_branch
from tests.utils.user import create_user_and_get_headers


def _create_flour(client: TestClient, branch_id: int, headers: dict, quantity: str = "10") -> dict:
    response = client.post(
        f"{settings.API_V1_STR}/branches/{branch_id}/ingredients/",
        json={"name": "Farinha de trigo", "quantity": quantity, "min_quantity": "4", "unit": "kg", "cost": "5.50"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def _history(client: TestClient, branch_id: int, ingredient_id: int, headers: dict) -> list:
    response = client.get(
        f"{settings.API_V1_STR}/branches/{branch_id}/ingredients/{ingredient_id}/history", headers=headers
    )
    assert response.status_code == 200
    return response.json()


def test_create_ingredient_records_initial_entry(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    ingredient = _create_flour(client, branch.id, headers)

    history = _history(client, branch.id, ingredient["id"], headers)
    assert len(history) == 1
    assert history[0]["type"] == "entrada"
    assert history[0]["reason"] == "Entrada inicial"
    assert Decimal(history[0]["quantity"]) == Decimal("10")
    assert ingredient["status"] == "Normal"


def test_adjust_quantity_appends_movement(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    ingredient = _create_flour(client, branch.id, headers)
    url = f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/{ingredient['id']}/adjust"

    # --- Act ---
    response = client.post(url, json={"delta": "-4.5", "reason": "Produção de bolos"}, headers=headers)

    # --- Assert ---
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["quantity"]) == Decimal("5.5")
    assert data["status"] == "Baixo"

    history = _history(client, branch.id, ingredient["id"], headers)
    assert [movement["type"] for movement in history] == ["entrada", "saída"]
    assert Decimal(history[1]["quantity"]) == Decimal("4.5")
    # A soma assinada do histórico é sempre igual à quantidade atual
    signed = sum(
        Decimal(m["quantity"]) if m["type"] == "entrada" else -Decimal(m["quantity"]) for m in history
    )
    assert signed == Decimal(data["quantity"])


def test_rejected_adjustment_leaves_state_unchanged(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    ingredient = _create_flour(client, branch.id, headers)
    url = f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/{ingredient['id']}"

    # --- Act ---
    response = client.post(f"{url}/adjust", json={"delta": "-15"}, headers=headers)

    # --- Assert ---
    assert response.status_code == 409
    current = client.get(url, headers=headers).json()
    assert Decimal(current["quantity"]) == Decimal("10")
    assert len(_history(client, branch.id, ingredient["id"], headers)) == 1


def test_zero_adjustment_is_invalid(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    ingredient = _create_flour(client, branch.id, headers)

    response = client.post(
        f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/{ingredient['id']}/adjust",
        json={"delta": "0"},
        headers=headers,
    )

    assert response.status_code == 422


def test_manual_entry_uses_default_reason(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    ingredient = _create_flour(client, branch.id, headers, quantity="0")

    response = client.post(
        f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/{ingredient['id']}/adjust",
        json={"delta": "3"},
        headers=headers,
    )

    assert response.status_code == 200
    history = _history(client, branch.id, ingredient["id"], headers)
    assert len(history) == 1
    assert history[0]["reason"] == "Entrada manual"


def test_update_does_not_change_quantity(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    ingredient = _create_flour(client, branch.id, headers)

    response = client.put(
        f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/{ingredient['id']}",
        json={"quantity": "999", "min_quantity": "20"},
        headers=headers,
    )

    assert response.status_code == 200
    assert Decimal(response.json()["quantity"]) == Decimal("10")
    assert response.json()["status"] == "Crítico"


def test_low_stock_lists_ingredients_at_or_below_minimum(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    _create_flour(client, branch.id, headers, quantity="4")
    _create_flour(client, branch.id, headers, quantity="50")

    response = client.get(f"{settings.API_V1_STR}/branches/{branch.id}/ingredients/low-stock", headers=headers)

    assert response.status_code == 200
    assert [Decimal(i["quantity"]) for i in response.json()] == [Decimal("4")]
