# tests/integration/test_catalog_and_employees.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bolerie import models
from bolerie.core.config import settings
from bolerie.models import UserRole
from tests.utils.branch import create_random_branch
from tests.utils.user import create_user_and_get_headers


def test_category_crud_with_hard_delete(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)
    url = f"{settings.API_V1_STR}/branches/{branch.id}/categories"

    created = client.post(url, json={"name": "Bolos"}, headers=headers).json()
    renamed = client.put(f"{url}/{created['id']}", json={"name": "Bolos Caseiros"}, headers=headers).json()
    deleted = client.delete(f"{url}/{created['id']}", headers=headers)

    assert renamed["name"] == "Bolos Caseiros"
    assert deleted.status_code == 204
    assert db.query(models.Category).count() == 0


def test_sizes_are_scoped_to_branch(client: TestClient, db: Session):
    branch = create_random_branch(db)
    other = create_random_branch(db)
    headers = create_user_and_get_headers(db, client)

    created = client.post(
        f"{settings.API_V1_STR}/branches/{branch.id}/sizes",
        json={"name": "Médio", "reference_value": "1.5"},
        headers=headers,
    ).json()

    response = client.put(
        f"{settings.API_V1_STR}/branches/{other.id}/sizes/{created['id']}", json={"name": "Grande"}, headers=headers
    )
    assert response.status_code == 404
    assert client.get(f"{settings.API_V1_STR}/branches/{other.id}/sizes", headers=headers).json() == []


def test_employee_crud_with_soft_delete(client: TestClient, db: Session):
    # --- Arrange ---
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client, role=UserRole.ADMIN, branch_ids=[branch.id])
    url = f"{settings.API_V1_STR}/branches/{branch.id}/employees/"

    # --- Act ---
    created = client.post(
        url,
        json={"name": "Rita", "age": 34, "salary": "2500.00", "payment_day": 5, "position": "Confeiteira"},
        headers=headers,
    )
    employee_id = created.json()["id"]
    deleted = client.delete(f"{url}{employee_id}", headers=headers)

    # --- Assert ---
    assert created.status_code == 201
    assert created.json()["position"] == "Confeiteira"
    assert deleted.status_code == 204
    assert client.get(url, headers=headers).json() == []
    assert db.query(models.Employee).filter_by(id=employee_id).one().is_active is False


def test_employee_role_cannot_manage_employees(client: TestClient, db: Session):
    branch = create_random_branch(db)
    headers = create_user_and_get_headers(db, client, role=UserRole.EMPLOYEE, branch_ids=[branch.id])

    response = client.get(f"{settings.API_V1_STR}/branches/{branch.id}/employees/", headers=headers)

    assert response.status_code == 403
