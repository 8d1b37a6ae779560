# app/domain/mobile_edge/service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.db.models.order_items import OrderItem
from app.db.models.orders import Order
from app.db.repositories.catalog import (
    get_active_customers_for_sales_rep,
    get_active_products,
    get_active_sales_reps,
    get_sales_rep_by_id,
)
from app.db.repositories.orders import (
    PENDING,
    get_order_by_mobile_id,
    get_orders_for_sales_rep,
    next_order_code,
)
from app.db.repositories.sync_logs import add_sync_log
from app.domain.sync_updates.service import list_active_sync_updates
from .schemas import MobileOrderIn, MobileOrderItemIn, ProcessedOrder, SyncOrderIn

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _build_items(items: Sequence[MobileOrderItemIn]) -> List[OrderItem]:
    rows = []
    for line_number, item in enumerate(items, start=1):
        rows.append(OrderItem(
            line_number=line_number,
            product_id=item.product_id,
            product_name=item.product_name,
            product_code=item.product_code,
            quantity=item.quantity,
            unit=item.unit or settings.DEFAULT_UNIT,
            unit_price=item.unit_price,
            price=item.price if item.price is not None else item.unit_price,
            discount=item.discount,
            total=item.total if item.total is not None else item.unit_price * item.quantity,
        ))
    return rows


def _apply_order_fields(order: Order, data: MobileOrderIn, sales_rep_id: UUID) -> None:
    order.customer_id = data.customer_id
    order.customer_name = data.customer_name
    order.sales_rep_id = sales_rep_id
    order.sales_rep_name = data.sales_rep_name
    order.date = data.date or _now()
    order.due_date = data.due_date
    order.delivery_date = data.delivery_date
    order.total = data.total
    order.discount = data.discount
    order.status = data.status or "pending"
    order.payment_status = data.payment_status or "pending"
    order.payment_method = data.payment_method
    order.payment_table = data.payment_table
    order.notes = data.notes
    order.delivery_address = data.delivery_address
    order.rejection_reason = data.rejection_reason
    order.source_project = "mobile"
    order.import_status = PENDING


async def receive_mobile_order(
    db: AsyncSession,
    sales_rep_id: UUID,
    data: MobileOrderIn,
) -> Order:
    """Stores one order sent by a device; it waits in the import queue as pending."""
    if data.customer_id is None or not data.items:
        raise ValidationError("Invalid order data")

    logger.info("Receiving mobile order from sales rep %s", sales_rep_id)
    try:
        order = Order(code=await next_order_code(db), mobile_order_id=data.mobile_order_id)
        _apply_order_fields(order, data, sales_rep_id)
        order.items = _build_items(data.items)
        db.add(order)
        await db.flush()

        add_sync_log(
            db,
            sales_rep_id=sales_rep_id,
            event_type="upload",
            data_type="orders",
            records_count=1,
            metadata={
                "order_id": str(order.id),
                "order_total": str(data.total),
                "items_count": len(data.items),
                "customer_id": str(data.customer_id),
            },
        )
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error saving mobile order from sales rep %s", sales_rep_id)
        raise PersistenceError("Error saving order") from exc

    logger.info("Mobile order %s saved", order.id)
    return order


async def _upsert_synced_order(
    db: AsyncSession,
    sales_rep_id: UUID,
    device_id: Optional[str],
    data: SyncOrderIn,
) -> ProcessedOrder:
    existing = await get_order_by_mobile_id(db, sales_rep_id, data.id)
    if existing is not None and existing.import_status != PENDING:
        return ProcessedOrder(
            localId=data.id,
            serverId=existing.id,
            code=existing.code,
            status="error",
            error=f"Order already {existing.import_status or 'processed'}",
        )

    try:
        if existing is None:
            order = Order(code=await next_order_code(db), mobile_order_id=data.id)
            db.add(order)
        else:
            order = existing
            order.items.clear()
            await db.flush()
        _apply_order_fields(order, data, sales_rep_id)
        order.device_id = device_id
        order.items.extend(_build_items(data.items))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error syncing order %s of sales rep %s", data.id, sales_rep_id)
        return ProcessedOrder(localId=data.id, status="error", error=str(exc.__class__.__name__))

    return ProcessedOrder(localId=data.id, serverId=order.id, code=order.code, status="synced")


async def sync_mobile_orders(
    db: AsyncSession,
    sales_rep_id: UUID,
    device_id: Optional[str],
    orders: Sequence[SyncOrderIn],
) -> List[ProcessedOrder]:
    logger.info("Receiving %d orders from device %s of sales rep %s", len(orders), device_id, sales_rep_id)

    processed = []
    for data in orders:
        result = await _upsert_synced_order(db, sales_rep_id, device_id, data)
        if result.status == "error":
            logger.warning("Order %s not synced: %s", data.id, result.error)
        processed.append(result)

    synced = [p for p in processed if p.status == "synced"]
    add_sync_log(
        db,
        sales_rep_id=sales_rep_id,
        event_type="upload",
        data_type="orders",
        status="completed" if len(synced) == len(processed) else "partial",
        records_count=len(synced),
        metadata={
            "device_id": device_id,
            "processed": [p.localId for p in synced],
            "failed": [p.localId for p in processed if p.status != "synced"],
        },
    )
    await db.commit()
    return processed


async def _log_download(db: AsyncSession, sales_rep_id: UUID, data_type: str, count: int) -> None:
    add_sync_log(
        db,
        sales_rep_id=sales_rep_id,
        event_type="sync",
        data_type=data_type,
        records_count=count,
        metadata={"sync_time": _now().isoformat()},
    )
    await db.commit()


async def customers_for_sales_rep(db: AsyncSession, sales_rep_id: UUID):
    rep = await get_sales_rep_by_id(db, sales_rep_id)
    if rep is None or not rep.active:
        raise NotFoundError("Sales rep not found")
    customers = await get_active_customers_for_sales_rep(db, sales_rep_id)
    logger.info("Sending %d customers to sales rep %s", len(customers), rep.name)
    await _log_download(db, sales_rep_id, "customers", len(customers))
    return customers


async def products_for_sales_rep(db: AsyncSession, sales_rep_id: UUID):
    products = await get_active_products(db)
    await _log_download(db, sales_rep_id, "products", len(products))
    return products


async def sales_reps_for_sales_rep(db: AsyncSession, sales_rep_id: UUID):
    reps = await get_active_sales_reps(db)
    await _log_download(db, sales_rep_id, "sales_reps", len(reps))
    return reps


async def orders_for_sales_rep(
    db: AsyncSession,
    sales_rep_id: UUID,
    since: Optional[datetime] = None,
):
    orders = await get_orders_for_sales_rep(db, sales_rep_id, since)
    await _log_download(db, sales_rep_id, "orders", len(orders))
    return orders


async def sync_updates_for_sales_rep(db: AsyncSession, sales_rep_id: UUID):
    updates = await list_active_sync_updates(db)
    await _log_download(db, sales_rep_id, "sync_updates", len(updates))
    return updates
