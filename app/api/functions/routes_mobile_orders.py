# app/api/functions/routes_mobile_orders.py
from fastapi import APIRouter, Depends
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession


from app.api.deps import require_sales_rep
from app.db.base import get_db
from app.domain.mobile_edge.schemas import MobileOrderCreated, MobileOrderIn
from app.domain.mobile_edge.service import receive_mobile_order


router = APIRouter(prefix="/functions/mobile-orders", tags=["mobile"])


@router.post("", response_model=MobileOrderCreated)
async def receive_order_endpoint(
    payload: MobileOrderIn,
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    order = await receive_mobile_order(db, sales_rep_id, payload)
    return MobileOrderCreated(orderId=order.id)
