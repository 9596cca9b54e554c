# bolerie/services/report_export.py
#
# Exportação dos relatórios de vendas e de estoque para planilha (.xlsx).

from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter

from .. import schemas

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SALES = "sales"
INVENTORY = "inventory"
KINDS = {SALES: "Vendas", INVENTORY: "Estoque"}

THIN = Side(style="thin", color="DDDDDD")
BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def export_filename(kind: str, today: datetime | None = None) -> str:
    today = today or datetime.now()
    return f"relatorio-{KINDS[kind].lower()}-{today.date().isoformat()}.xlsx"


def _title(ws, kind: str, start: datetime, end: datetime) -> None:
    ws.merge_cells("A1:G1")
    ws["A1"] = f"Relatório de {KINDS[kind]} - {start:%d/%m/%Y} a {end:%d/%m/%Y}"
    ws["A1"].font = Font(bold=True, size=16, color="4F4F4F")
    ws["A1"].alignment = Alignment(vertical="center", horizontal="center")
    ws.row_dimensions[1].height = 30


def _section(ws, title: str, headers: List[str], rows: Iterable[list]) -> None:
    ws.append([])
    ws.append([title])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
    ws.append(headers)
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)
        cell.border = BORDER
    for row in rows:
        ws.append(row)
        for cell in ws[ws.max_row]:
            cell.border = BORDER


def _auto_width(ws) -> None:
    widths = {}
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if cell.value is not None:
                widths[cell.column] = max(widths.get(cell.column, 0), len(str(cell.value)))
    for column, length in widths.items():
        ws.column_dimensions[get_column_letter(column)].width = min(length + 2, 50)


def _to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _money(value: Decimal) -> float:
    # Células numéricas para permitir somas e gráficos na planilha
    return float(round(Decimal(value), 2))


def sales_workbook(report: schemas.SalesReport, start: datetime, end: datetime) -> bytes:
    """Métricas principais, vendas por período e por forma de pagamento."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Vendas"
    _title(ws, SALES, start, end)

    total = sum((p.total for p in report.periods), Decimal("0"))
    count = sum(p.count for p in report.periods)
    average = total / count if count else Decimal("0")
    top_method = report.by_payment_method[0] if report.by_payment_method else None

    _section(ws, "Métricas Principais", ["Métrica", "Valor"], [
        ["Total de Vendas (R$)", _money(total)],
        ["Número de Pedidos", count],
        ["Ticket Médio (R$)", _money(average)],
        ["Forma de Pagamento Mais Usada",
         f"{top_method.method} ({round(top_method.percentage)}%)" if top_method else "-"],
    ])
    _section(ws, "Vendas por Período", ["Período", "Valor (R$)", "Pedidos", "Ticket Médio (R$)"], [
        [p.label, _money(p.total), p.count, _money(p.average_ticket)] for p in report.periods
    ])
    _section(ws, "Vendas por Forma de Pagamento", ["Método", "Valor (R$)", "Pedidos", "Porcentagem (%)"], [
        [m.method, _money(m.total), m.count, round(m.percentage, 2)] for m in report.by_payment_method
    ])
    _section(ws, "Melhores Períodos", ["Período", "Valor (R$)", "Pedidos"], [
        [p.label, _money(p.total), p.count] for p in report.best_periods
    ])

    _auto_width(ws)
    return _to_bytes(wb)


def inventory_workbook(report: schemas.InventoryReport, start: datetime, end: datetime) -> bytes:
    """Estoque baixo, estoque alto e produtos mais vendidos no período."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Estoque"
    _title(ws, INVENTORY, start, end)

    _section(ws, "Estoque Baixo", ["Produto", "Estoque"], [
        [entry.name, entry.stock] for entry in report.low_stock
    ])
    _section(ws, "Estoque Alto", ["Produto", "Estoque"], [
        [entry.name, entry.stock] for entry in report.high_stock
    ])
    _section(ws, "Produtos Mais Vendidos", ["Produto", "Quantidade", "Receita (R$)"], [
        [best.name, best.quantity, _money(best.revenue)] for best in report.best_selling
    ])

    _auto_width(ws)
    return _to_bytes(wb)
