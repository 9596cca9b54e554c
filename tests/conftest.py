# tests/conftest.py

import os

# O banco de testes precisa estar definido ANTES de importar a aplicação,
# porque o engine é criado na importação de bolerie.database.
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("FIRST_OWNER_EMAIL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from typing import Generator  # noqa: E402

from bolerie.main import app  # noqa: E402
from bolerie.database import Base, SessionLocal, engine, get_db  # noqa: E402


@pytest.fixture(scope="function")
def db() -> Generator:
    """Sessão de banco de dados limpa para cada teste."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator:
    """TestClient com a dependência do DB sobrescrita para usar a sessão do teste."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()
