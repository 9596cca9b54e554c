# bolerie/crud/crud_product.py

from sqlalchemy.orm import Session
from .. import models, schemas

# Cada função é focada em uma única operação de DB.


def _active_products(db: Session, branch_id: int):
    return db.query(models.Product).filter(
        models.Product.branch_id == branch_id,
        models.Product.active.is_(True),
    )


def get_product(db: Session, product_id: int, branch_id: int) -> models.Product | None:
    return _active_products(db, branch_id).filter(models.Product.id == product_id).first()


def get_products(db: Session, branch_id: int, skip: int = 0, limit: int = 100) -> list[models.Product]:
    return _active_products(db, branch_id).order_by(models.Product.name).offset(skip).limit(limit).all()


def get_all_products(db: Session, branch_id: int) -> list[models.Product]:
    """Todos os produtos ativos da filial, sem paginação (usado nos relatórios)."""
    return _active_products(db, branch_id).order_by(models.Product.name).all()


def get_products_by_category(db: Session, branch_id: int, category: str) -> list[models.Product]:
    return _active_products(db, branch_id).filter(
        models.Product.category == category
    ).order_by(models.Product.name).all()


def _build_sizes(sizes: list[schemas.ProductSize]) -> list[models.ProductSize]:
    return [
        models.ProductSize(name=size.name, price=size.price, position=position)
        for position, size in enumerate(sizes)
    ]


def create_product(db: Session, product: schemas.ProductCreate, branch_id: int) -> models.Product:
    product_data = product.model_dump(exclude={"sizes"})
    db_product = models.Product(**product_data, branch_id=branch_id)
    db_product.sizes = _build_sizes(product.sizes)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def update_product(db: Session, db_product: models.Product, product_update: schemas.ProductUpdate) -> models.Product:
    update_data = product_update.model_dump(exclude_unset=True, exclude={"sizes"})
    for key, value in update_data.items():
        setattr(db_product, key, value)

    # Tamanhos só são substituídos se vierem no corpo da requisição
    if "sizes" in product_update.model_fields_set and product_update.sizes is not None:
        db_product.sizes = _build_sizes(product_update.sizes)

    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def delete_product(db: Session, db_product: models.Product):
    """Exclusão lógica: o produto continua referenciado pelas vendas antigas."""
    db_product.active = False
    db.add(db_product)
    db.commit()

# --- Funções CRUD atômicas usadas pelos serviços (não fazem commit) ---


def get_product_for_update(db: Session, product_id: int, branch_id: int) -> models.Product | None:
    """Busca um produto aplicando um lock pessimista na linha para evitar race conditions."""
    return db.query(models.Product).filter(
        models.Product.id == product_id,
        models.Product.branch_id == branch_id,
    ).with_for_update().first()


def decrease_stock(db: Session, *, product: models.Product, quantity: int) -> models.Product:
    """Diminui o estoque físico de um produto, sem ficar negativo. Não faz commit."""
    product.stock = max(0, product.stock - quantity)
    db.add(product)
    return product
