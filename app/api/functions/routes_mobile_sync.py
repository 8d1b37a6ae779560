# app/api/functions/routes_mobile_sync.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession


from app.api.deps import require_sales_rep
from app.core.errors import AuthError
from app.db.base import get_db
from app.domain.mobile_edge import service
from app.domain.mobile_edge.schemas import (
    ConsumeSyncUpdateRequest,
    CustomerOut,
    ProductOut,
    SalesRepOut,
    SyncDataOut,
    SyncOrdersRequest,
    SyncOrdersResult,
)
from app.domain.order_items.schemas import OrderOut
from app.domain.sync_updates.schemas import ConsumeResult, SyncUpdateOut
from app.domain.sync_updates.service import consume_sync_update


router = APIRouter(prefix="/functions/mobile-sync", tags=["mobile"])


def _data(rows, schema) -> SyncDataOut:
    return SyncDataOut(
        data=[schema.model_validate(row).model_dump(mode="json") for row in rows],
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/get-customers", response_model=SyncDataOut)
async def customers_endpoint(
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    return _data(await service.customers_for_sales_rep(db, sales_rep_id), CustomerOut)

@router.get("/get-products", response_model=SyncDataOut)
async def products_endpoint(
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    return _data(await service.products_for_sales_rep(db, sales_rep_id), ProductOut)

@router.get("/get-sales-reps", response_model=SyncDataOut)
async def sales_reps_endpoint(
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    return _data(await service.sales_reps_for_sales_rep(db, sales_rep_id), SalesRepOut)

@router.get("/get-orders", response_model=SyncDataOut)
async def orders_endpoint(
    last_sync: Optional[datetime] = None,
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    return _data(await service.orders_for_sales_rep(db, sales_rep_id, last_sync), OrderOut)

@router.get("/get-sync-updates", response_model=SyncDataOut)
async def sync_updates_endpoint(
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    return _data(await service.sync_updates_for_sales_rep(db, sales_rep_id), SyncUpdateOut)

@router.post("/sync-orders", response_model=SyncOrdersResult)
async def sync_orders_endpoint(
    payload: SyncOrdersRequest,
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    if payload.salesRepId is not None and payload.salesRepId != sales_rep_id:
        raise AuthError("Token does not belong to this sales rep")

    processed = await service.sync_mobile_orders(db, sales_rep_id, payload.deviceId, payload.orders)
    return SyncOrdersResult(processed=processed, syncedAt=datetime.now(timezone.utc))

@router.post("/consume-sync-update", response_model=ConsumeResult)
async def consume_endpoint(
    payload: ConsumeSyncUpdateRequest,
    sales_rep_id: UUID = Depends(require_sales_rep),
    db: AsyncSession = Depends(get_db),
):
    success = await consume_sync_update(db, payload.updateId, str(sales_rep_id), payload.deviceId)
    return ConsumeResult(success=success)
