# bolerie/services/receipt_service.py
#
# Monta o comprovante de venda ou de reserva. Texto de 40 colunas para
# impressoras térmicas/POS e HTML de página inteira para A4.

import html
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from .. import models, schemas
from ..models import PrinterType

WIDTH = 40
FOOTER = ["Obrigado pela preferência!", "Volte sempre!"]

PAYMENT_LABELS = {
    "credit": "Cartão de Crédito",
    "debit": "Cartão de Débito",
    "cash": "Dinheiro",
    "pix": "PIX",
    "dinheiro": "Dinheiro",
    "cartao": "Cartão",
    "transferencia": "Transferência",
}


class ReceiptItem(BaseModel):
    name: str
    size: Optional[str] = None
    quantity: int
    price: Decimal


class ReceiptPayload(BaseModel):
    store: schemas.StoreSettings
    title: str
    customer_name: Optional[str] = None
    items: List[ReceiptItem]
    total: Decimal
    payment_method: Optional[str] = None
    date: datetime
    # Só para reservas
    delivery_date: Optional[datetime] = None
    advance_amount: Optional[Decimal] = None
    advance_payment_method: Optional[str] = None
    remaining_amount: Optional[Decimal] = None


def format_payment_method(method: Optional[str]) -> str:
    if not method:
        return "Não especificado"
    return PAYMENT_LABELS.get(method, method)


def _money(value) -> str:
    return f"R$ {Decimal(str(value)):.2f}".replace(".", ",")


def payload_from_sale(sale: models.Sale, store: schemas.StoreSettings) -> ReceiptPayload:
    return ReceiptPayload(
        store=store,
        title=f"VENDA #{sale.id}",
        customer_name=sale.customer_name,
        items=[
            ReceiptItem(name=item.name, size=item.size, quantity=item.quantity, price=item.price)
            for item in sale.items
        ],
        total=sale.total,
        payment_method=sale.payment_method,
        date=sale.date,
    )


def payload_from_reservation(reservation: models.Reservation, store: schemas.StoreSettings) -> ReceiptPayload:
    items = [
        ReceiptItem(name=item.product_name, size=item.size, quantity=item.quantity, price=item.price)
        for item in reservation.items
    ]

    payload = ReceiptPayload(
        store=store,
        title=f"RESERVA #{reservation.id}",
        customer_name=reservation.customer_name,
        items=items,
        total=reservation.total,
        payment_method=reservation.payment_method,
        date=reservation.date,
        delivery_date=reservation.delivery_date,
    )
    if reservation.has_advance_payment:
        payload.advance_amount = reservation.advance_amount
        payload.advance_payment_method = reservation.advance_payment_method
        payload.remaining_amount = reservation.remaining_amount
    return payload


def _line(left: str, right: str) -> str:
    space = WIDTH - len(left) - len(right)
    if space < 1:
        left = left[: WIDTH - len(right) - 1]
        space = 1
    return f"{left}{' ' * space}{right}"


def render_text(payload: ReceiptPayload) -> str:
    separator = "-" * WIDTH
    lines = [
        payload.store.name.upper()[:WIDTH].center(WIDTH),
        payload.store.address[:WIDTH].center(WIDTH),
        payload.store.phone[:WIDTH].center(WIDTH),
        separator,
        payload.title.center(WIDTH),
        f"Data: {payload.date.strftime('%d/%m/%Y %H:%M')}",
    ]
    if payload.customer_name:
        lines.append(f"Cliente: {payload.customer_name}"[:WIDTH])
    lines.append(separator)

    for item in payload.items:
        name = f"{item.name} ({item.size})" if item.size else item.name
        lines.append(name[:WIDTH])
        lines.append(_line(f"  {item.quantity} x {_money(item.price)}", _money(item.price * item.quantity)))

    lines.append(separator)
    lines.append(_line("TOTAL", _money(payload.total)))
    lines.append(_line("Pagamento", format_payment_method(payload.payment_method)))

    if payload.delivery_date:
        lines.append(_line("Entrega", payload.delivery_date.strftime("%d/%m/%Y %H:%M")))
    if payload.advance_amount is not None:
        lines.append(_line("Adiantamento", _money(payload.advance_amount)))
        lines.append(_line("Pago com", format_payment_method(payload.advance_payment_method)))
        lines.append(_line("Restante", _money(payload.remaining_amount or 0)))

    lines.append(separator)
    lines.extend(text.center(WIDTH) for text in FOOTER)
    return "\n".join(line.rstrip() for line in lines) + "\n"


def render_html(payload: ReceiptPayload) -> str:
    e = html.escape
    rows = "".join(
        f"<tr><td>{e(item.name)}{f' ({e(item.size)})' if item.size else ''}</td>"
        f"<td>{item.quantity}</td><td>{_money(item.price)}</td>"
        f"<td>{_money(item.price * item.quantity)}</td></tr>"
        for item in payload.items
    )
    extra = ""
    if payload.delivery_date:
        extra += f"<p><strong>Data de Entrega:</strong> {payload.delivery_date.strftime('%d/%m/%Y %H:%M')}</p>"
    if payload.advance_amount is not None:
        extra += (
            f"<p><strong>Adiantamento:</strong> {_money(payload.advance_amount)}</p>"
            f"<p><strong>Forma de Pagamento (Adiantamento):</strong> "
            f"{e(format_payment_method(payload.advance_payment_method))}</p>"
            f"<p><strong>Valor Restante:</strong> {_money(payload.remaining_amount or 0)}</p>"
        )
    customer = f"<p><strong>Cliente:</strong> {e(payload.customer_name)}</p>" if payload.customer_name else ""

    return (
        "<!DOCTYPE html><html lang=\"pt-BR\"><head><meta charset=\"utf-8\">"
        f"<title>{e(payload.title)}</title>"
        "<style>body{font-family:Arial,sans-serif;margin:2cm}table{width:100%;border-collapse:collapse}"
        "td,th{border-bottom:1px solid #ddd;padding:6px;text-align:left}.footer{margin-top:2em;text-align:center}</style>"
        "</head><body>"
        f"<div class=\"header\"><h1>{e(payload.store.name)}</h1>"
        f"<p>{e(payload.store.address)}</p><p>{e(payload.store.phone)} | {e(payload.store.email)}</p></div>"
        f"<h2>{e(payload.title)}</h2>"
        f"<p><strong>Data:</strong> {payload.date.strftime('%d/%m/%Y %H:%M')}</p>{customer}"
        "<table><thead><tr><th>Produto</th><th>Qtd</th><th>Preço</th><th>Subtotal</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        f"<p><strong>Total:</strong> {_money(payload.total)}</p>"
        f"<p><strong>Forma de Pagamento:</strong> {e(format_payment_method(payload.payment_method))}</p>"
        f"{extra}"
        f"<div class=\"footer\"><p>{'<br>'.join(FOOTER)}</p></div>"
        "</body></html>"
    )


def render_receipt(payload: ReceiptPayload, printer_type: PrinterType) -> str:
    if printer_type == PrinterType.A4:
        return render_html(payload)
    return render_text(payload)
