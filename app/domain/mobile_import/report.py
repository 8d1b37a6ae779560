# app/domain/mobile_import/report.py
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from pydantic import BaseModel

from .grouping import UNASSIGNED_NAME, sales_rep_key

logger = logging.getLogger(__name__)

IMPORT = "import"
REJECT = "reject"


class ReportSummary(BaseModel):
    total_orders: int
    total_value: Decimal
    sales_reps_count: int
    total_items: int


class ReportOrderLine(BaseModel):
    id: str
    code: Optional[int] = None
    customer_name: str
    total: Decimal
    items_count: int
    rejection_reason: Optional[str] = None


class SalesRepBreakdown(BaseModel):
    sales_rep_id: str
    sales_rep_name: str
    orders_count: int
    total_value: Decimal
    orders: List[ReportOrderLine]


class TopProduct(BaseModel):
    product_name: str
    product_code: Optional[int] = None
    total_quantity: Decimal
    occurrences: int


class ImportReportData(BaseModel):
    id: str
    timestamp: datetime
    operation_type: str
    operator: str
    summary: ReportSummary
    sales_rep_breakdown: List[SalesRepBreakdown]
    top_products: List[TopProduct]
    notes: Optional[str] = None


def generate_import_report(
    orders: Iterable,
    operation_type: str,
    operator: str = "admin",
    top_products: int = 10,
) -> ImportReportData:
    orders = list(orders)
    logger.info("Generating %s report for %d orders", operation_type, len(orders))

    breakdown: Dict[str, SalesRepBreakdown] = {}
    products: Dict[str, TopProduct] = {}
    total_value = Decimal(0)
    total_items = 0

    for order in orders:
        order_total = Decimal(str(order.total or 0))
        items = list(order.items or [])
        total_value += order_total
        total_items += len(items)

        key = sales_rep_key(order)
        rep = breakdown.get(key)
        if rep is None:
            rep = breakdown[key] = SalesRepBreakdown(
                sales_rep_id=key,
                sales_rep_name=(order.sales_rep_name or "") if key else UNASSIGNED_NAME,
                orders_count=0,
                total_value=Decimal(0),
                orders=[],
            )
        rep.orders_count += 1
        rep.total_value += order_total
        rep.orders.append(ReportOrderLine(
            id=str(order.id),
            code=order.code,
            customer_name=order.customer_name or "",
            total=order_total,
            items_count=len(items),
            rejection_reason=order.rejection_reason,
        ))

        for item in items:
            product_key = f"{item.product_code}-{item.product_name}"
            product = products.get(product_key)
            if product is None:
                product = products[product_key] = TopProduct(
                    product_name=item.product_name,
                    product_code=item.product_code,
                    total_quantity=Decimal(0),
                    occurrences=0,
                )
            product.total_quantity += Decimal(str(item.quantity))
            product.occurrences += 1

    ranked = sorted(products.values(), key=lambda p: p.total_quantity, reverse=True)

    return ImportReportData(
        id=str(uuid4()),
        timestamp=datetime.now(timezone.utc),
        operation_type=operation_type,
        operator=operator,
        summary=ReportSummary(
            total_orders=len(orders),
            total_value=total_value,
            sales_reps_count=len(breakdown),
            total_items=total_items,
        ),
        sales_rep_breakdown=sorted(breakdown.values(), key=lambda r: r.total_value, reverse=True),
        top_products=ranked[:top_products],
        notes="Orders rejected during the import process" if operation_type == REJECT else None,
    )


def _money(value) -> str:
    return f"{Decimal(value):,.2f}"


def format_import_report(report: ImportReportData) -> str:
    lines = [
        f"MOBILE ORDERS {report.operation_type.upper()} REPORT",
        f"Generated at: {report.timestamp:%Y-%m-%d %H:%M:%S}",
        f"Operator: {report.operator}",
        "",
        "=== SUMMARY ===",
        f"Total orders: {report.summary.total_orders}",
        f"Total value: {_money(report.summary.total_value)}",
        f"Sales reps: {report.summary.sales_reps_count}",
        f"Total items: {report.summary.total_items}",
        "",
        "=== BY SALES REP ===",
    ]
    for rep in report.sales_rep_breakdown:
        lines.append(f"{rep.sales_rep_name} ({rep.orders_count} orders - {_money(rep.total_value)})")
        for order in rep.orders:
            line = (
                f"  * Order #{order.code or 'N/A'} - {order.customer_name} - "
                f"{_money(order.total)} ({order.items_count} items)"
            )
            if order.rejection_reason:
                line += f" [Rejected: {order.rejection_reason}]"
            lines.append(line)
        lines.append("")

    lines.append("=== TOP PRODUCTS ===")
    for position, product in enumerate(report.top_products, start=1):
        lines.append(
            f"{position}. {product.product_name} (code {product.product_code}) - "
            f"qty {product.total_quantity} ({product.occurrences} orders)"
        )

    if report.notes:
        lines.extend(["", "=== NOTES ===", report.notes])
    return "\n".join(lines)
