# app/domain/order_items/service.py
import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, PersistenceError
from app.core.guard import OperationGuard
from app.db.models.order_items import OrderItem
from app.db.models.orders import Order
from app.db.repositories.catalog import get_product_by_id
from app.db.repositories.orders import (
    delete_items_by_product_code,
    get_item_by_id,
    get_items_for_order,
    get_order_by_id,
    next_line_number,
    sum_item_totals,
)
from .engine import DraftItem, OrderDraft, ProductRef
from .schemas import AddItem

logger = logging.getLogger(__name__)

# one add/remove at a time per persisted order
order_item_guard = OperationGuard("order-items")


class SqlOrderItemStore:
    """Stages draft line writes of one persisted order on an AsyncSession.

    Every step only flushes; the draft commits once, or rolls back, at the end
    of a change.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_item(self, order_id: str, item: DraftItem) -> str:
        try:
            row = await get_item_by_id(self.db, UUID(item.id))
            if row is None:
                row = OrderItem(
                    id=UUID(item.id),
                    order_id=UUID(order_id),
                    line_number=await next_line_number(self.db, UUID(order_id)),
                    product_id=UUID(item.product_id),
                    product_name=item.product_name,
                    product_code=item.product_code,
                    discount=item.discount,
                    unit=item.unit,
                )
                self.db.add(row)
            row.quantity = item.quantity
            row.unit_price = item.unit_price
            row.price = item.price
            row.total = item.total
            await self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Error saving item %s of order %s", item.id, order_id)
            raise PersistenceError("Could not save the item") from exc
        return str(row.id)

    async def delete_items_by_product_code(self, order_id: str, product_code: int) -> None:
        try:
            await delete_items_by_product_code(self.db, UUID(order_id), product_code)
        except SQLAlchemyError as exc:
            logger.exception("Error removing product %s from order %s", product_code, order_id)
            raise PersistenceError("Could not remove the item") from exc

    async def delete_item(self, order_id: str, item_id: str) -> None:
        try:
            row = await get_item_by_id(self.db, UUID(item_id))
            if row is not None:
                await self.db.delete(row)
                await self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Error removing item %s from order %s", item_id, order_id)
            raise PersistenceError("Could not remove the item") from exc

    async def update_order_total(self, order_id: str):
        try:
            order = await apply_order_total(self.db, UUID(order_id))
        except SQLAlchemyError as exc:
            logger.exception("Error updating total of order %s", order_id)
            raise PersistenceError("Could not update the order total") from exc
        return order.total

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Error committing order item changes")
            raise PersistenceError("Could not save the order") from exc

    async def rollback(self) -> None:
        await self.db.rollback()


async def get_order(db: AsyncSession, order_id: UUID) -> Order:
    order = await get_order_by_id(db, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order

async def load_order_draft(db: AsyncSession, order_id: UUID) -> OrderDraft:
    await get_order(db, order_id)
    rows = await get_items_for_order(db, order_id)
    return OrderDraft(
        [DraftItem.from_model(row) for row in rows],
        order_id=str(order_id),
        store=SqlOrderItemStore(db),
        default_unit=settings.DEFAULT_UNIT,
    )

async def add_item_to_order(
    db: AsyncSession,
    order_id: UUID,
    data: AddItem,
) -> Optional[DraftItem]:
    with order_item_guard.hold(str(order_id), data.operation_id) as acquired:
        if not acquired:
            return None

        product = await get_product_by_id(db, data.product_id)
        if product is None:
            raise NotFoundError("Product not found")

        draft = await load_order_draft(db, order_id)
        return await draft.add_item(
            ProductRef.from_model(product),
            data.quantity,
            data.price,
            unit=data.unit,
        )

async def remove_item_from_order(
    db: AsyncSession,
    order_id: UUID,
    product_id: UUID,
    operation_id: Optional[str] = None,
) -> Optional[List[DraftItem]]:
    with order_item_guard.hold(str(order_id), operation_id) as acquired:
        if not acquired:
            return None

        draft = await load_order_draft(db, order_id)
        return await draft.remove_item(str(product_id))

async def apply_order_total(
    db: AsyncSession,
    order_id: UUID
) -> Order:
    """Stages the order total (line totals minus discount, never negative) without committing."""
    order = await get_order_by_id(db, order_id)

    if order is None:
        raise NotFoundError("Order not found")

    subtotal = await sum_item_totals(db, order_id)
    total = subtotal - (order.discount or 0)
    order.total = total if total > 0 else 0
    await db.flush()
    return order

async def recalculate_totals(
    db: AsyncSession,
    order_id: UUID
) -> Order:
    order = await apply_order_total(db, order_id)

    await db.commit()
    await db.refresh(order)
    return order
