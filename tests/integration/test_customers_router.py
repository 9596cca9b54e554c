# tests/integration/test_customers_router.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bolerie import crud
from bolerie.core.config import settings
from bolerie.schemas import CustomerCreate
from tests.utils.branch import create_random_branch
from tests.utils.customer import create_random_customer
from tests.utils.user import create_user_and_get_headers


def _url(branch_id: int, path: str = "") -> str:
    return f"{settings.API_V1_STR}/branches/{branch_id}/customers{path}"


def test_search_matches_name_email_and_phone(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    maria = crud.customer.create(
        db, obj_in=CustomerCreate(name="Maria Oliveira", email="maria@exemplo.com", phone="11987654321"), branch_id=branch.id
    )
    crud.customer.create(
        db, obj_in=CustomerCreate(name="Pedro Santos", email="pedro@exemplo.com", phone="11911112222"), branch_id=branch.id
    )

    # --- Act & Assert ---
    by_name = client.get(_url(branch.id, "/?q=MARIA"), headers=headers).json()
    by_email = client.get(_url(branch.id, "/?q=maria@exe"), headers=headers).json()
    by_phone = client.get(_url(branch.id, "/?q=987654"), headers=headers).json()
    assert [c["id"] for c in by_name] == [maria.id]
    assert [c["id"] for c in by_email] == [maria.id]
    assert [c["id"] for c in by_phone] == [maria.id]

    everyone = client.get(_url(branch.id, "/?q="), headers=headers).json()
    assert [c["name"] for c in everyone] == ["Maria Oliveira", "Pedro Santos"]


def test_customer_from_other_branch_is_not_found(client: TestClient, db: Session):
    branch = create_random_branch(db)
    other = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    customer = create_random_customer(db, branch_id=other.id)

    response = client.get(_url(branch.id, f"/{customer.id}"), headers=headers)

    assert response.status_code == 404


def test_deleted_customer_is_hidden(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    customer = create_random_customer(db, branch_id=branch.id)

    assert client.delete(_url(branch.id, f"/{customer.id}"), headers=headers).status_code == 204

    assert client.get(_url(branch.id, f"/{customer.id}"), headers=headers).status_code == 404
    assert client.get(_url(branch.id, "/"), headers=headers).json() == []


def test_new_customer_gets_tier_for_initial_points(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    response = client.post(_url(branch.id, "/"), json={"name": "Lucia", "loyalty_points": 350}, headers=headers)

    ouro = next(level for level in crud.loyalty_level.get_multi(db, branch_id=branch.id) if level.name == "Ouro")
    assert response.json()["loyalty_level_id"] == ouro.id
