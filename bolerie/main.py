# bolerie/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import models, crud, schemas
from .core.config import settings
from .core.logging import setup_logging
from .database import engine, SessionLocal
from .models import UserRole
from .routers import (
    auth, users, branches, catalog, products, ingredients, customers, loyalty,
    reservations, sales, employees, settings as store_settings, notifications, reports
)

setup_logging()
logger = logging.getLogger(__name__)

# Cria as tabelas no banco de dados (se não existirem)
models.Base.metadata.create_all(bind=engine)


def create_first_owner() -> None:
    """Cria o primeiro dono a partir das variáveis de ambiente, se ainda não houver usuários."""
    if not settings.FIRST_OWNER_EMAIL or not settings.FIRST_OWNER_PASSWORD:
        return
    db = SessionLocal()
    try:
        if crud.user.count(db) > 0:
            return
        crud.user.create(db, obj_in=schemas.UserCreate(
            email=settings.FIRST_OWNER_EMAIL,
            password=settings.FIRST_OWNER_PASSWORD,
            name="Proprietário",
            role=UserRole.OWNER,
        ))
        logger.info(f"Primeiro dono criado: {settings.FIRST_OWNER_EMAIL}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_first_owner()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Back-office da confeitaria: vendas, reservas, estoque e fidelidade.",
    lifespan=lifespan
)


# Todos os routers ficam sob o prefixo da API
for module in (
    auth, users, branches, catalog, products, ingredients, customers, loyalty,
    reservations, sales, employees, store_settings, notifications, reports
):
    app.include_router(module.router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    """
    Endpoint raiz. Apenas diz 'Olá' para confirmar que a API está no ar.
    """
    return {"message": "Bem-vindo à API da Bolerie!"}
