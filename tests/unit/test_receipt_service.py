# tests/unit/test_receipt_service.py

from datetime import datetime
from decimal import Decimal

from bolerie.models import PrinterType
from bolerie.schemas import StoreSettings
from bolerie.services.receipt_service import (
    ReceiptItem, ReceiptPayload, WIDTH, format_payment_method, render_receipt
)


def _payload(**extra) -> ReceiptPayload:
    store = StoreSettings(name="Bolerie - Centro", address="Rua das Flores, 123", phone="(11) 99999-9999", email="a@b.com")
    return ReceiptPayload(
        store=store,
        title="RESERVA #12",
        customer_name="Maria <Silva>",
        items=[
            ReceiptItem(name="Bolo de Chocolate com Morango e Chantilly Especial", size="G", quantity=1, price=Decimal("120")),
            ReceiptItem(name="Cupcake", quantity=6, price=Decimal("8.5")),
        ],
        total=Decimal("171"),
        payment_method="cash",
        date=datetime(2024, 5, 10, 14, 30),
        **extra,
    )


def test_payment_labels_are_portuguese():
    assert format_payment_method("credit") == "Cartão de Crédito"
    assert format_payment_method("pix") == "PIX"
    assert format_payment_method("vale") == "vale"
    assert format_payment_method(None) == "Não especificado"


def test_thermal_receipt_fits_forty_columns():
    text = render_receipt(_payload(), PrinterType.THERMAL)

    assert all(len(line) <= WIDTH for line in text.splitlines())
    assert "TOTAL" in text
    assert "R$ 171,00" in text
    assert "Dinheiro" in text


def test_reservation_receipt_shows_advance_fields():
    payload = _payload(
        delivery_date=datetime(2024, 5, 12, 10),
        advance_amount=Decimal("71"),
        advance_payment_method="pix",
        remaining_amount=Decimal("100"),
    )

    text = render_receipt(payload, PrinterType.POS)

    assert "Adiantamento" in text
    assert "R$ 100,00" in text
    assert "12/05/2024" in text


def test_a4_receipt_is_escaped_html():
    html = render_receipt(_payload(), PrinterType.A4)

    assert html.startswith("<!DOCTYPE html>")
    assert "Maria &lt;Silva&gt;" in html
    assert "Bolerie - Centro" in html
