# bolerie/services/reporting.py
#
# Agregações dos relatórios. Funções puras: recebem as coleções já
# carregadas e não acessam o banco.

from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, List

from .. import schemas
from ..core.config import settings
from ..models import ReservationStatus

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
GRANULARITIES = (DAILY, WEEKLY, MONTHLY)

WEEKDAYS = ["Domingo", "Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado"]
MONTHS = ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"]

UNSPECIFIED_METHOD = "Não especificado"


def _as_date(moment) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


def _sunday_index(moment) -> int:
    """0 = domingo ... 6 = sábado."""
    return (_as_date(moment).weekday() + 1) % 7


def bucket_start(moment, granularity: str) -> date:
    day = _as_date(moment)
    if granularity == DAILY:
        return day
    if granularity == WEEKLY:
        return day - timedelta(days=_sunday_index(day))
    if granularity == MONTHLY:
        return day.replace(day=1)
    raise ValueError(f"Unknown granularity: {granularity}")


def _next_bucket(start: date, granularity: str) -> date:
    if granularity == DAILY:
        return start + timedelta(days=1)
    if granularity == WEEKLY:
        return start + timedelta(days=7)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def build_buckets(start, end, granularity: str) -> List[date]:
    """Um balde por unidade de calendário cobrindo [start, end], inclusive os vazios."""
    current = bucket_start(start, granularity)
    last = bucket_start(end, granularity)
    buckets = []
    while current <= last:
        buckets.append(current)
        current = _next_bucket(current, granularity)
    return buckets


def bucket_label(start: date, granularity: str) -> str:
    if granularity == DAILY:
        return start.strftime("%Y-%m-%d")
    if granularity == WEEKLY:
        week_end = start + timedelta(days=6)
        return f"{start.strftime('%d/%m')} - {week_end.strftime('%d/%m')}"
    return f"{MONTHS[start.month - 1]}/{start.year}"


def _average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return Decimal("0")
    return (total / count).quantize(Decimal("0.01"))


def percent_change(current, previous) -> float:
    """Variação percentual de `previous` para `current`; 0 quando não há base de comparação."""
    if not previous or previous <= 0:
        return 0.0
    return round(float((Decimal(str(current)) - Decimal(str(previous))) / Decimal(str(previous)) * 100), 1)


def totals(sales: Iterable) -> schemas.TotalsSummary:
    sales = list(sales)
    total = sum((Decimal(str(sale.total)) for sale in sales), Decimal("0"))
    return schemas.TotalsSummary(total=total, count=len(sales), average_ticket=_average(total, len(sales)))


def sales_by_period(sales: Iterable, start, end, granularity: str) -> List[schemas.PeriodSummary]:
    buckets = OrderedDict((bucket, [Decimal("0"), 0]) for bucket in build_buckets(start, end, granularity))
    for sale in sales:
        key = bucket_start(sale.date, granularity)
        if key not in buckets:
            continue
        buckets[key][0] += Decimal(str(sale.total))
        buckets[key][1] += 1

    return [
        schemas.PeriodSummary(
            period_start=bucket,
            label=bucket_label(bucket, granularity),
            total=total,
            count=count,
            average_ticket=_average(total, count),
        )
        for bucket, (total, count) in buckets.items()
    ]


def sales_by_payment_method(sales: Iterable) -> List[schemas.PaymentMethodSummary]:
    grouped = {}
    grand_total = Decimal("0")
    for sale in sales:
        method = sale.payment_method or UNSPECIFIED_METHOD
        entry = grouped.setdefault(method, [Decimal("0"), 0])
        entry[0] += Decimal(str(sale.total))
        entry[1] += 1
        grand_total += Decimal(str(sale.total))

    result = [
        schemas.PaymentMethodSummary(
            method=method,
            total=total,
            count=count,
            percentage=float(total / grand_total * 100) if grand_total else 0.0,
        )
        for method, (total, count) in grouped.items()
    ]
    return sorted(result, key=lambda entry: entry.total, reverse=True)


def best_periods(periods: List[schemas.PeriodSummary], n: int = 5) -> List[schemas.PeriodSummary]:
    return sorted(periods, key=lambda period: period.total, reverse=True)[:n]


# --- Estoque ---

def _stock_entry(product) -> schemas.StockEntry:
    return schemas.StockEntry(product_id=product.id, name=product.name, stock=product.stock)


def low_stock_products(products: Iterable, n: int = 10, threshold: int | None = None) -> List[schemas.StockEntry]:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    low = sorted((p for p in products if p.stock < threshold), key=lambda p: p.stock)
    return [_stock_entry(p) for p in low[:n]]


def high_stock_products(products: Iterable, n: int = 10, threshold: int | None = None) -> List[schemas.StockEntry]:
    threshold = settings.HIGH_STOCK_THRESHOLD if threshold is None else threshold
    high = sorted((p for p in products if p.stock > threshold), key=lambda p: p.stock, reverse=True)
    return [_stock_entry(p) for p in high[:n]]


def best_selling_products(sales: Iterable, n: int = 10) -> List[schemas.BestSeller]:
    grouped = {}
    for sale in sales:
        for item in sale.items:
            entry = grouped.setdefault(item.product_id, {"name": item.name, "quantity": 0, "revenue": Decimal("0")})
            entry["quantity"] += item.quantity
            entry["revenue"] += Decimal(str(item.total))

    ranked = sorted(grouped.items(), key=lambda pair: pair[1]["quantity"], reverse=True)
    return [
        schemas.BestSeller(product_id=product_id, **data)
        for product_id, data in ranked[:n]
    ]


# --- Reservas ---

def _pending_value(reservation) -> Decimal:
    remaining = Decimal(str(reservation.remaining_amount or 0))
    if reservation.has_advance_payment and remaining != 0:
        return remaining
    return Decimal(str(reservation.total))


def reservation_status_summary(reservations: Iterable) -> schemas.ReservationStatusSummary:
    reservations = list(reservations)
    pending = [r for r in reservations if r.status == ReservationStatus.PENDING]
    return schemas.ReservationStatusSummary(
        total=len(reservations),
        pending=len(pending),
        completed=sum(1 for r in reservations if r.status == ReservationStatus.COMPLETED),
        cancelled=sum(1 for r in reservations if r.status == ReservationStatus.CANCELLED),
        pending_value=sum((_pending_value(r) for r in pending), Decimal("0")),
    )


def reservations_by_weekday(reservations: Iterable) -> List[schemas.WeekdayCount]:
    counts = [0] * 7
    for reservation in reservations:
        counts[_sunday_index(reservation.date)] += 1
    return [schemas.WeekdayCount(weekday=name, count=count) for name, count in zip(WEEKDAYS, counts)]


def top_reserved_products(reservations: Iterable, n: int = 10) -> List[schemas.ReservedProduct]:
    grouped = {}
    for reservation in reservations:
        for item in reservation.items:
            entry = grouped.setdefault(item.product_name, [0, Decimal("0")])
            entry[0] += item.quantity
            entry[1] += Decimal(str(item.price)) * item.quantity

    ranked = sorted(grouped.items(), key=lambda pair: pair[1][0], reverse=True)
    return [
        schemas.ReservedProduct(name=name, quantity=quantity, value=value)
        for name, (quantity, value) in ranked[:n]
    ]
