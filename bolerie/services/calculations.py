# bolerie/services/calculations.py
#
# Funções puras de cálculo, sem acesso ao banco. Usadas tanto pelos serviços
# quanto pelos schemas (campos calculados nas respostas).

from decimal import Decimal
from typing import Any, Iterable, Optional


def compute_total(items: Iterable[Any]) -> Decimal:
    """Total de uma reserva: soma de quantidade x preço de cada item."""
    return sum((Decimal(item.quantity) * Decimal(item.price) for item in items), Decimal("0"))


def compute_remaining(total: Decimal, has_advance: bool, advance_amount: Optional[Decimal]) -> Decimal:
    """Valor a receber na entrega."""
    if has_advance:
        return Decimal(total) - Decimal(advance_amount or 0)
    return Decimal(total)


def advance_error(total: Decimal, has_advance: bool, advance_amount: Optional[Decimal]) -> str | None:
    """Retorna a mensagem de erro se o adiantamento for inválido, senão None."""
    if not has_advance:
        return None
    amount = Decimal(advance_amount or 0)
    if amount < 0:
        return "Advance amount cannot be negative."
    if amount > Decimal(total):
        return f"Advance amount ({amount}) cannot exceed the reservation total ({total})."
    return None


def legacy_fields(items: list[Any]) -> dict:
    """
    Projeção dos campos "achatados" usados por leitores antigos, anteriores
    à lista de itens: dados do primeiro item e a quantidade agregada.
    """
    if not items:
        return {"product_id": None, "product_name": "", "quantity": 0, "price": Decimal("0")}
    first = items[0]
    return {
        "product_id": first.product_id,
        "product_name": first.product_name,
        "quantity": sum(item.quantity for item in items),
        "price": Decimal(first.price),
    }


def classify_stock(quantity: Decimal, min_quantity: Decimal) -> str:
    quantity = Decimal(quantity)
    min_quantity = Decimal(min_quantity)
    if quantity < min_quantity:
        return "Crítico"
    if quantity < min_quantity * Decimal("1.5"):
        return "Baixo"
    return "Normal"


def product_unit_price(product: Any, size_name: Optional[str]) -> Decimal:
    """
    Preço unitário de um produto. Se o produto tem tamanhos, o preço vem
    do tamanho escolhido e não do preço base.

    Levanta ValueError se o tamanho for obrigatório e não existir.
    """
    if not product.sizes:
        return Decimal(product.price)
    if size_name is None:
        raise ValueError(f"Product '{product.name}' requires a size.")
    for size in product.sizes:
        if size.name == size_name:
            return Decimal(size.price)
    raise ValueError(f"Size '{size_name}' not found for product '{product.name}'.")
