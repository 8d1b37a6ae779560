
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from app.db.models.orders import Order
from app.db.models.order_items import OrderItem

PENDING = "pending"
IMPORTED = "imported"
REJECTED = "rejected"


async def get_order_by_id(
    db: AsyncSession,
    order_id: UUID
) -> Optional[Order]:
    result = await db.execute(
        select(Order).where(Order.id == order_id)
    )
    order = result.scalar_one_or_none()
    return order

async def get_items_for_order(
    db: AsyncSession,
    order_id: UUID
) -> List[OrderItem]:
    result = await db.execute(
        select(OrderItem)
        .where(OrderItem.order_id == order_id)
        .order_by(OrderItem.line_number)
    )
    return list(result.scalars().all())

async def get_item_by_id(
    db: AsyncSession,
    item_id: UUID
) -> Optional[OrderItem]:
    result = await db.execute(select(OrderItem).where(OrderItem.id == item_id))
    return result.scalar_one_or_none()

async def next_line_number(
    db: AsyncSession,
    order_id: UUID
) -> int:
    result = await db.execute(
        select(func.coalesce(func.max(OrderItem.line_number), 0)).where(OrderItem.order_id == order_id)
    )
    return int(result.scalar()) + 1

async def delete_items_by_product_code(
    db: AsyncSession,
    order_id: UUID,
    product_code: int
) -> int:
    result = await db.execute(
        delete(OrderItem)
        .where(OrderItem.order_id == order_id)
        .where(OrderItem.product_code == product_code)
    )
    return result.rowcount or 0

async def sum_item_totals(
    db: AsyncSession,
    order_id: UUID
) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(OrderItem.total), 0)).where(OrderItem.order_id == order_id)
    )
    return Decimal(str(result.scalar() or 0))

async def get_pending_mobile_orders(db: AsyncSession) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.source_project == "mobile")
        .where(Order.import_status == PENDING)
        .order_by(Order.created_at.desc(), Order.code.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())

async def set_import_status(
    db: AsyncSession,
    order_ids: Sequence[UUID],
    status: str,
    operator: str,
    at: datetime,
) -> int:
    """Moves still-pending mobile orders to ``status``; returns the number of rows changed."""
    values = {
        "import_status": status,
        "imported_at": at,
        "imported_by": operator,
        "updated_at": at,
    }
    if status == IMPORTED:
        values["source_project"] = "admin"

    result = await db.execute(
        update(Order)
        .where(Order.id.in_(list(order_ids)))
        .where(Order.import_status == PENDING)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0

async def get_import_history(
    db: AsyncSession,
    limit: int = 100
) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.mobile_order_id.is_not(None))
        .where(Order.import_status.in_([IMPORTED, REJECTED]))
        .order_by(Order.imported_at.desc())
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())

async def get_order_by_mobile_id(
    db: AsyncSession,
    sales_rep_id: UUID,
    mobile_order_id: str
) -> Optional[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.sales_rep_id == sales_rep_id)
        .where(Order.mobile_order_id == mobile_order_id)
    )
    return result.scalars().first()

async def get_orders_for_sales_rep(
    db: AsyncSession,
    sales_rep_id: UUID,
    since: Optional[datetime] = None
) -> List[Order]:
    stmt = select(Order).where(Order.sales_rep_id == sales_rep_id)
    if since is not None:
        stmt = stmt.where(Order.updated_at >= since)
    result = await db.execute(stmt.order_by(Order.created_at.desc()))
    return list(result.scalars().all())

async def next_order_code(db: AsyncSession) -> int:
    result = await db.execute(select(func.coalesce(func.max(Order.code), 0)))
    return int(result.scalar()) + 1
