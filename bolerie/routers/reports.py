# bolerie/routers/reports.py

from datetime import datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import models, schemas, auth
from ..crud import crud_product, crud_reservation, crud_sale
from ..database import get_db
from ..models import SaleStatus
from ..services import report_export, reporting

router = APIRouter(
    prefix="/branches/{branch_id}/reports",
    tags=["Reports"]
)


def _naive_local(moment: Optional[datetime]) -> Optional[datetime]:
    # As datas do negócio são gravadas no horário local, sem fuso
    if moment is not None and moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def _period(start: Optional[datetime], end: Optional[datetime]) -> tuple[datetime, datetime]:
    """Sem datas, o padrão é o último mês até o fim do dia de hoje."""
    start, end = _naive_local(start), _naive_local(end)
    end = end or datetime.combine(datetime.now().date(), time.max)
    start = start or datetime.combine(end.date() - timedelta(days=30), time.min)
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start must be before end")
    return start, end


def _check_granularity(granularity: str) -> None:
    if granularity not in reporting.GRANULARITIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"granularity must be one of {list(reporting.GRANULARITIES)}"
        )


def _build_sales_report(db: Session, branch_id: int, start: datetime, end: datetime, granularity: str) -> schemas.SalesReport:
    sales = [
        sale for sale in crud_sale.get_by_date_range(db, branch_id, start, end)
        if sale.status == SaleStatus.COMPLETED
    ]
    periods = reporting.sales_by_period(sales, start, end, granularity)
    return schemas.SalesReport(
        periods=periods,
        by_payment_method=reporting.sales_by_payment_method(sales),
        best_periods=reporting.best_periods(periods),
    )


def _build_inventory_report(db: Session, branch_id: int, start: datetime, end: datetime) -> schemas.InventoryReport:
    products = crud_product.get_all_products(db, branch_id)
    sales = crud_sale.get_by_date_range(db, branch_id, start, end)
    return schemas.InventoryReport(
        low_stock=reporting.low_stock_products(products),
        high_stock=reporting.high_stock_products(products),
        best_selling=reporting.best_selling_products(sales),
    )


@router.get("/sales", response_model=schemas.SalesReport)
def sales_report(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    granularity: str = reporting.DAILY,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    _check_granularity(granularity)
    start, end = _period(start, end)
    return _build_sales_report(db, branch.id, start, end, granularity)


@router.get("/inventory", response_model=schemas.InventoryReport)
def inventory_report(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    start, end = _period(start, end)
    return _build_inventory_report(db, branch.id, start, end)


@router.get("/reservations", response_model=schemas.ReservationReport)
def reservations_report(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    start, end = _period(start, end)
    reservations = crud_reservation.get_by_date_range(db, branch.id, start, end)
    return schemas.ReservationReport(
        status=reporting.reservation_status_summary(reservations),
        by_weekday=reporting.reservations_by_weekday(reservations),
        top_products=reporting.top_reserved_products(reservations),
    )


@router.get("/{kind}/export")
def export_report(
    kind: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    granularity: str = reporting.DAILY,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    """Baixa o relatório de vendas ou de estoque como planilha .xlsx."""
    if kind not in report_export.KINDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report must be one of {list(report_export.KINDS)}"
        )
    start, end = _period(start, end)
    if kind == report_export.SALES:
        _check_granularity(granularity)
        content = report_export.sales_workbook(_build_sales_report(db, branch.id, start, end, granularity), start, end)
    else:
        content = report_export.inventory_workbook(_build_inventory_report(db, branch.id, start, end), start, end)

    filename = report_export.export_filename(kind)
    return Response(
        content=content,
        media_type=report_export.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
