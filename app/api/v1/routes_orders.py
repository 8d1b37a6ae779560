# app/api/v1/routes_orders.py
from fastapi import APIRouter, Depends
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession


from app.core.errors import BusinessError
from app.db.base import get_db
from app.domain.order_items.schemas import AddItem, OrderItemOut, OrderOut
from app.domain.order_items.service import (
    add_item_to_order,
    get_order,
    recalculate_totals,
    remove_item_from_order,
)


router = APIRouter(prefix="/api/v1/orders", tags=["orders"])

BUSY = "Another change to this order is in progress"


@router.get("/{order_id}", response_model=OrderOut)
async def get_order_endpoint(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await get_order(db, order_id)

@router.get("/{order_id}/items", response_model=List[OrderItemOut])
async def list_items_endpoint(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    order = await get_order(db, order_id)
    return order.items

@router.post("/{order_id}/items", response_model=OrderItemOut)
async def add_item_endpoint(
    order_id: UUID,
    payload: AddItem,
    db: AsyncSession = Depends(get_db),
):
    line = await add_item_to_order(db, order_id, payload)
    if line is None:
        raise BusinessError(BUSY)
    return line

@router.delete("/{order_id}/items/{product_id}", response_model=List[OrderItemOut])
async def remove_item_endpoint(
    order_id: UUID,
    product_id: UUID,
    operation_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    removed = await remove_item_from_order(db, order_id, product_id, operation_id)
    if removed is None:
        raise BusinessError(BUSY)
    return removed

@router.post("/{order_id}/recalculate", response_model=OrderOut)
async def recalculate_endpoint(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await recalculate_totals(db, order_id)
