# bolerie/routers/sales.py

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models, schemas, auth
from ..crud import crud_sale
from ..database import get_db
from ..models import PrinterType
from ..services import receipt_service
from ..services.sale_service import SaleService, SaleRecordingError
from ..services.store_settings_service import StoreSettingsService
from .deps import not_found, unwrap

router = APIRouter(
    prefix="/branches/{branch_id}/sales",
    tags=["Sales"]
)


def get_sale_service(db: Session = Depends(get_db)) -> SaleService:
    return SaleService(db=db)


@router.post("/", response_model=schemas.SaleOutcome, status_code=status.HTTP_201_CREATED)
def record_sale(
    sale_in: schemas.SaleCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    current_user: models.User = Depends(auth.get_current_user),
    service: SaleService = Depends(get_sale_service)
):
    """
    Registra uma venda no caixa.
    - Atualiza pedidos, pontos e nível do cliente (se houver).
    - Baixa o estoque dos produtos (nunca abaixo de zero).
    """
    try:
        return unwrap(service.record_sale(branch_id=branch.id, sale_in=sale_in, user=current_user))
    except SaleRecordingError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/", response_model=List[schemas.Sale])
def read_sales(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    skip: int = 0, limit: int = 100,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    service: SaleService = Depends(get_sale_service)
):
    if start is not None and end is not None:
        return service.get_by_date_range(branch_id=branch.id, start=start, end=end)
    return crud_sale.get_sales(db, branch.id, skip=skip, limit=limit)


@router.get("/recent", response_model=List[schemas.Sale])
def read_recent_sales(
    limit: int = 5,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: SaleService = Depends(get_sale_service)
):
    return service.get_recent(branch_id=branch.id, limit=limit)


@router.get("/summary", response_model=schemas.SalesDashboardSummary)
def read_sales_summary(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    service: SaleService = Depends(get_sale_service)
):
    """Resumo do painel: hoje, últimos 7 dias e mês corrente."""
    return service.get_summary(branch_id=branch.id)


@router.get("/{sale_id}", response_model=schemas.Sale)
def read_sale(
    sale_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_sale = crud_sale.get_sale(db, sale_id, branch.id)
    if db_sale is None:
        raise not_found("Sale")
    return db_sale


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sale(
    sale_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.require_admin_or_owner)
):
    db_sale = crud_sale.get_sale(db, sale_id, branch.id)
    if db_sale is None:
        raise not_found("Sale")
    crud_sale.delete_sale(db, db_sale)
    return None


@router.get("/{sale_id}/receipt")
def read_sale_receipt(
    sale_id: int,
    printer_type: Optional[PrinterType] = None,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    """Comprovante no formato da impressora configurada (ou do `printer_type` informado)."""
    db_sale = crud_sale.get_sale(db, sale_id, branch.id)
    if db_sale is None:
        raise not_found("Sale")
    store = StoreSettingsService(db).get_settings(branch.id)
    printer_type = printer_type or store.printer_type
    content = receipt_service.render_receipt(receipt_service.payload_from_sale(db_sale, store), printer_type)
    if printer_type == PrinterType.A4:
        return HTMLResponse(content)
    return PlainTextResponse(content)
