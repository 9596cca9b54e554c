# tests/utils/user.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from faker import Faker

from bolerie import crud
from bolerie.core.config import settings
from bolerie.models import User, UserRole
from bolerie.schemas import UserCreate

fake = Faker()

DEFAULT_PASSWORD = "senha-de-teste-123"


def create_random_user(
    db: Session,
    *,
    role: UserRole = UserRole.EMPLOYEE,
    branch_ids: list[int] | None = None,
    password: str = DEFAULT_PASSWORD
) -> User:
    """
    Cria um usuário com dados aleatórios no banco de dados de teste.
    Usa o CRUD da aplicação para que o hash da senha seja o mesmo da aplicação real.

    :param role: O papel do usuário (owner, admin ou employee).
    :param branch_ids: Filiais às quais o usuário terá acesso.
    """
    user_in = UserCreate(
        email=fake.unique.email(),
        name=fake.name(),
        password=password,
        role=role,
        branch_ids=branch_ids or [],
    )
    return crud.user.create(db=db, obj_in=user_in)


def user_authentication_headers(
    *, client: TestClient, email: str, password: str = DEFAULT_PASSWORD
) -> dict[str, str]:
    """
    Faz o login pelo endpoint de token e devolve os headers de autenticação.
    """
    data = {"username": email, "password": password}
    response = client.post(f"{settings.API_V1_STR}/token", data=data)

    if response.status_code != 200:
        raise Exception(f"Falha ao autenticar o usuário {email}. Status: {response.status_code}, Detalhe: {response.text}")

    access_token = response.json()["access_token"]
    return {"Authorization": f"Bearer {access_token}"}


def create_user_and_get_headers(
    db: Session,
    client: TestClient,
    *,
    role: UserRole = UserRole.OWNER,
    branch_ids: list[int] | None = None
) -> dict[str, str]:
    """
    Cria um usuário aleatório, faz o login e retorna os headers.
    Utilitário preferencial para testes de endpoints protegidos.
    """
    user = create_random_user(db, role=role, branch_ids=branch_ids)
    return user_authentication_headers(client=client, email=user.email)
