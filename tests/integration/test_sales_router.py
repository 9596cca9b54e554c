# tests/integration/test_sales_router.py

from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bolerie import crud, models
from bolerie.core.config import settings
from bolerie.models import UserRole
from tests.utils.branch import create_random_branch
from tests.utils.customer import create_random_customer
from tests.utils.product import create_random_product
from tests.utils.user import create_user_and_get_headers


def _url(branch_id: int, path: str = "") -> str:
    return f"{settings.API_V1_STR}/branches/{branch_id}{path}"


def test_sale_with_customer_awards_points_and_builds_history(client: TestClient, db: Session):
    """
    Fluxo completo: cliente novo (0 pontos) compra R$ 250 e ganha 25 pontos,
    fica com 1 pedido no histórico e no nível Bronze.
    """
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client, role=UserRole.OWNER)
    product = create_random_product(db, branch_id=branch.id, price=250.0, cost_price=100.0, stock=10)

    response = client.post(_url(branch.id, "/customers/"), json={"name": "Ana Souza"}, headers=headers)
    assert response.status_code == 201
    customer_id = response.json()["id"]

    # --- Act ---
    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}], "payment_method": "pix", "customer_id": customer_id},
        headers=headers,
    )

    # --- Assert ---
    assert response.status_code == 201
    outcome = response.json()
    assert outcome["points_awarded"] == 25
    assert outcome["stock_warnings"] == []
    assert Decimal(outcome["sale"]["total"]) == Decimal("250")
    assert Decimal(outcome["sale"]["profit"]) == Decimal("150")
    assert outcome["sale"]["status"] == "completed"

    customer = client.get(_url(branch.id, f"/customers/{customer_id}"), headers=headers).json()
    bronze = next(level for level in crud.loyalty_level.get_multi(db, branch_id=branch.id) if level.name == "Bronze")
    assert customer["loyalty_points"] == 25
    assert customer["total_orders"] == 1
    assert customer["last_order_date"] is not None
    assert len(customer["order_history"]) == 1
    assert customer["order_history"][0]["id"] == outcome["sale"]["id"]
    assert customer["loyalty_level_id"] == bronze.id

    db.refresh(product)
    assert product.stock == 9


def test_sale_reaching_100_points_promotes_customer(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, price=100.0, stock=5)
    customer = create_random_customer(db, branch_id=branch.id, loyalty_points=90)

    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}], "customer_id": customer.id},
        headers=headers,
    )

    assert response.status_code == 201
    db.refresh(customer)
    assert customer.loyalty_points == 100
    prata = db.query(models.LoyaltyLevel).filter_by(branch_id=branch.id, name="Prata").one()
    assert customer.loyalty_level_id == prata.id


def test_stock_is_floored_at_zero_and_sale_is_recorded(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, price=10.0, stock=2)

    # --- Act ---
    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 5}], "payment_method": "cash"},
        headers=headers,
    )

    # --- Assert ---
    assert response.status_code == 201
    assert Decimal(response.json()["sale"]["total"]) == Decimal("50")
    db.refresh(product)
    assert product.stock == 0


def test_sale_with_unknown_product_creates_nothing(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, stock=10)

    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}, {"product_id": 9999, "quantity": 1}]},
        headers=headers,
    )

    assert response.status_code == 404
    assert db.query(models.Sale).count() == 0
    db.refresh(product)
    assert product.stock == 10


def test_sale_rejects_non_positive_quantity(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id)

    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 0}]},
        headers=headers,
    )

    assert response.status_code == 422


def test_sale_uses_size_price(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, price=10.0, sizes=[("P", 15.0), ("G", 30.0)])

    ok = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 2, "size": "G"}]},
        headers=headers,
    )
    unknown_size = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1, "size": "GG"}]},
        headers=headers,
    )

    assert ok.status_code == 201
    item = ok.json()["sale"]["items"][0]
    assert Decimal(item["price"]) == Decimal("30")
    assert Decimal(ok.json()["sale"]["total"]) == Decimal("60")
    assert unknown_size.status_code == 422


def test_explicit_total_overrides_item_sum(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, price=100.0, cost_price=40.0)

    response = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}], "total": "95.00"},
        headers=headers,
    )

    sale = response.json()["sale"]
    assert Decimal(sale["total"]) == Decimal("95")
    assert Decimal(sale["profit"]) == Decimal("55")


def test_sale_receipt_renders_for_thermal_and_a4(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch.id, price=12.0)
    sale_id = client.post(
        _url(branch.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}], "payment_method": "cash"},
        headers=headers,
    ).json()["sale"]["id"]

    thermal = client.get(_url(branch.id, f"/sales/{sale_id}/receipt"), headers=headers)
    a4 = client.get(_url(branch.id, f"/sales/{sale_id}/receipt?printer_type=a4"), headers=headers)

    assert thermal.status_code == 200
    assert thermal.headers["content-type"].startswith("text/plain")
    assert "Dinheiro" in thermal.text
    assert a4.headers["content-type"].startswith("text/html")
    assert f"VENDA #{sale_id}" in a4.text


def test_employee_cannot_access_other_branch(client: TestClient, db: Session):
    branch_a = create_random_branch(db)
    branch_b = create_random_branch(db)
    headers = create_user_and_get_headers(db, client, role=UserRole.EMPLOYEE, branch_ids=[branch_a.id])

    assert client.get(_url(branch_a.id, "/sales/"), headers=headers).status_code == 200
    assert client.get(_url(branch_b.id, "/sales/"), headers=headers).status_code == 403


def test_sale_from_other_branch_is_not_found(client: TestClient, db: Session):
    branch_a = create_random_branch(db)
    branch_b = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    product = create_random_product(db, branch_id=branch_a.id, stock=10)

    response = client.post(
        _url(branch_b.id, "/sales/"),
        json={"items": [{"product_id": product.id, "quantity": 1}]},
        headers=headers,
    )

    assert response.status_code == 404
    db.refresh(product)
    assert product.stock == 10
