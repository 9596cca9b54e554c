# bolerie/services/sale_service.py

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas, crud
from ..crud import crud_product, crud_sale
from ..models import SaleStatus
from . import reporting
from .calculations import product_unit_price
from .loyalty_service import LoyaltyService
from .result import ServiceResult

logger = logging.getLogger(__name__)

# Abaixo disso o estoque do produto gera um alerta no log após a venda
LOW_STOCK_WARNING = 10


class SaleRecordingError(RuntimeError):
    """Exceção para erros inesperados durante o registro de uma venda."""
    pass


class SaleService:
    def __init__(self, db: Session):
        self.db = db
        self.loyalty = LoyaltyService(db)

    def record_sale(
        self, *, branch_id: int, sale_in: schemas.SaleCreate, user: Optional[models.User] = None
    ) -> ServiceResult[schemas.SaleOutcome]:
        """
        Registra uma venda concluída. Em uma única transação: grava a venda,
        atualiza o cliente (pedidos, pontos e nível) e baixa o estoque.
        """
        # --- FASE 1: VALIDAÇÃO (nenhuma escrita) ---
        customer = None
        if sale_in.customer_id is not None:
            customer = crud.customer.get(self.db, sale_in.customer_id, branch_id=branch_id)
            if not customer:
                return ServiceResult.not_found(f"Customer with id {sale_in.customer_id} not found.")

        lines = []
        for item in sale_in.items:
            product = crud_product.get_product(self.db, item.product_id, branch_id)
            if not product:
                return ServiceResult.not_found(f"Product with id {item.product_id} not found.")
            try:
                unit_price = product_unit_price(product, item.size)
            except ValueError as e:
                return ServiceResult.invalid(str(e))

            cost_price = Decimal(str(product.cost_price or 0))
            lines.append(models.SaleItem(
                product_id=product.id,
                name=product.name,
                size=item.size,
                quantity=item.quantity,
                price=unit_price,
                cost_price=cost_price,
                total=unit_price * item.quantity,
                total_cost=cost_price * item.quantity,
            ))

        items_total = sum((line.total for line in lines), Decimal("0"))
        total_cost = sum((line.total_cost for line in lines), Decimal("0"))
        total = sale_in.total if sale_in.total is not None else items_total

        # --- FASE 2: PERSISTÊNCIA (uma transação) ---
        try:
            db_sale = crud_sale.create_sale(self.db, sale=models.Sale(
                branch_id=branch_id,
                customer_id=customer.id if customer else None,
                customer_name=customer.name if customer else None,
                total=total,
                total_cost=total_cost,
                profit=total - total_cost,
                payment_method=sale_in.payment_method,
                status=SaleStatus.COMPLETED,
                date=datetime.now(),
                items=lines,
            ))

            points = 0
            if customer:
                customer.total_orders = (customer.total_orders or 0) + 1
                customer.last_order_date = db_sale.date
                points = self.loyalty.award_points_for_order(customer, total)
                self.db.add(customer)

            stock_warnings = []
            for line in lines:
                product = crud_product.get_product_for_update(self.db, line.product_id, branch_id)
                if product is None:
                    message = f"Product {line.product_id} ({line.name}) not found; stock not updated."
                    logger.warning(f"Venda na filial {branch_id}: {message}")
                    stock_warnings.append(message)
                    continue
                crud_product.decrease_stock(self.db, product=product, quantity=line.quantity)
                logger.info(f"Estoque de '{product.name}' baixado em {line.quantity} (restam {product.stock}).")
                if product.stock < LOW_STOCK_WARNING:
                    logger.warning(f"Estoque baixo para '{product.name}': {product.stock} unidades.")

            self.db.commit()
            self.db.refresh(db_sale)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Erro ao registrar venda na filial {branch_id}: {e}", exc_info=True)
            raise SaleRecordingError(f"An unexpected error occurred while recording the sale: {e}")

        logger.info(f"Venda {db_sale.id} registrada na filial {branch_id}: total {db_sale.total}.")
        return ServiceResult.success(schemas.SaleOutcome(
            sale=schemas.Sale.model_validate(db_sale),
            points_awarded=points,
            stock_warnings=stock_warnings,
        ))

    def order_history(self, *, customer_id: int, branch_id: int) -> List[models.Sale]:
        """Histórico de pedidos do cliente, projetado a partir das vendas."""
        return crud_sale.get_by_customer(self.db, branch_id, customer_id)

    def get_by_date_range(self, *, branch_id: int, start: datetime, end: datetime) -> List[models.Sale]:
        return crud_sale.get_by_date_range(self.db, branch_id, start, end)

    def get_recent(self, *, branch_id: int, limit: int = 5) -> List[models.Sale]:
        return crud_sale.get_recent(self.db, branch_id, limit)

    def items_sold_count(self, *, branch_id: int, start: datetime, end: datetime) -> int:
        return crud_sale.items_sold_count(self.db, branch_id, start, end)

    def sales_total(self, *, branch_id: int, start: datetime, end: datetime) -> Decimal:
        return crud_sale.sales_total(self.db, branch_id, start, end)

    def get_summary(self, *, branch_id: int, now: Optional[datetime] = None) -> schemas.SalesDashboardSummary:
        """Resumo do painel: hoje, últimos 7 dias e mês corrente, com a comparação de hoje contra ontem."""
        now = now or datetime.now()
        today_start = datetime.combine(now.date(), datetime.min.time())
        week_start = today_start - timedelta(days=6)
        month_start = today_start.replace(day=1)

        month_sales = [
            sale for sale in crud_sale.get_by_date_range(self.db, branch_id, month_start, now)
            if sale.status == SaleStatus.COMPLETED
        ]
        week_sales = [
            sale for sale in crud_sale.get_by_date_range(self.db, branch_id, week_start, now)
            if sale.status == SaleStatus.COMPLETED
        ]
        today_sales = [sale for sale in week_sales if sale.date >= today_start]
        yesterday_start = today_start - timedelta(days=1)
        yesterday_end = today_start - timedelta(microseconds=1)
        today_total = reporting.totals(today_sales).total
        yesterday_total = self.sales_total(branch_id=branch_id, start=yesterday_start, end=yesterday_end)
        items_today = self.items_sold_count(branch_id=branch_id, start=today_start, end=now)
        items_yesterday = self.items_sold_count(branch_id=branch_id, start=yesterday_start, end=yesterday_end)
        customers_today = crud.customer.count_new_customers(self.db, branch_id=branch_id, start=today_start, end=now)
        customers_yesterday = crud.customer.count_new_customers(
            self.db, branch_id=branch_id, start=yesterday_start, end=yesterday_end
        )

        return schemas.SalesDashboardSummary(
            daily_sales=reporting.totals(today_sales),
            weekly_sales=reporting.totals(week_sales),
            monthly_sales=reporting.totals(month_sales),
            sales_by_payment_method=reporting.sales_by_payment_method(month_sales),
            monthly_profit=sum((Decimal(str(sale.profit)) for sale in month_sales), Decimal("0")),
            sales_vs_yesterday=schemas.DailyComparison(
                today=today_total,
                yesterday=yesterday_total,
                percent_change=reporting.percent_change(today_total, yesterday_total),
            ),
            items_sold=schemas.CountComparison(
                today=items_today,
                yesterday=items_yesterday,
                percent_change=reporting.percent_change(items_today, items_yesterday),
            ),
            new_customers=schemas.CountComparison(
                today=customers_today,
                yesterday=customers_yesterday,
                percent_change=reporting.percent_change(customers_today, customers_yesterday),
            ),
        )
