# tests/utils/product.py

from decimal import Decimal

from sqlalchemy.orm import Session
from faker import Faker

from bolerie.crud import crud_product
from bolerie.models import Product
from bolerie.schemas import ProductCreate, ProductSize

fake = Faker()


def create_random_product(
    db: Session,
    *,
    branch_id: int,
    price: float = None,
    cost_price: float = None,
    stock: int = None,
    sizes: list[tuple[str, float]] | None = None,
    category: str | None = None
) -> Product:
    """
    Cria um produto com dados aleatórios ou especificados no banco de dados de teste.

    :param sizes: Lista de (nome, preço) na ordem em que devem ser gravados.
    """
    if cost_price is None:
        cost_price = round(fake.pydecimal(left_digits=2, right_digits=2, positive=True, min_value=5, max_value=40), 2)
    else:
        cost_price = Decimal(str(cost_price))

    # Preço de venda sempre acima do custo, se não for informado
    if price is None:
        price = (cost_price * 2).quantize(Decimal("0.01"))
    else:
        price = Decimal(str(price))

    if stock is None:
        stock = fake.random_int(min=10, max=100)

    product_in = ProductCreate(
        name=f"Bolo de {fake.word()}",
        description=fake.sentence(),
        price=price,
        cost_price=cost_price,
        stock=stock,
        category=category,
        sizes=[ProductSize(name=name, price=Decimal(str(value))) for name, value in (sizes or [])],
    )
    return crud_product.create_product(db=db, product=product_in, branch_id=branch_id)
