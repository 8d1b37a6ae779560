# app/api/v1/routes_sync_updates.py
from fastapi import APIRouter, Depends
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.domain.sync_updates.schemas import (
    ConsumeResult,
    ReactivateRequest,
    ReactivateResult,
    SyncStats,
    SyncUpdateConsume,
    SyncUpdateCreate,
    SyncUpdateCreated,
    SyncUpdateOut,
)
from app.domain.sync_updates.service import (
    consume_sync_update,
    create_sync_update,
    list_active_sync_updates,
    reactivate_orphaned_sync_updates,
    sync_update_history,
    sync_update_stats,
)


router = APIRouter(prefix="/api/v1/sync-updates", tags=["sync-updates"])


@router.post("", response_model=SyncUpdateCreated)
async def create_endpoint(
    payload: SyncUpdateCreate,
    db: AsyncSession = Depends(get_db),
):
    update = await create_sync_update(db, payload.data_types, payload.description, payload.created_by)
    return SyncUpdateCreated(id=update.id)

@router.get("", response_model=List[SyncUpdateOut])
async def history_endpoint(
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return await sync_update_history(db, limit)

@router.get("/active", response_model=List[SyncUpdateOut])
async def active_endpoint(db: AsyncSession = Depends(get_db)):
    return await list_active_sync_updates(db)

@router.get("/stats", response_model=SyncStats)
async def stats_endpoint(db: AsyncSession = Depends(get_db)):
    return await sync_update_stats(db)

@router.post("/{update_id}/consume", response_model=ConsumeResult)
async def consume_endpoint(
    update_id: UUID,
    payload: SyncUpdateConsume,
    db: AsyncSession = Depends(get_db),
):
    success = await consume_sync_update(db, update_id, payload.consumed_by, payload.device_id)
    return ConsumeResult(success=success)

@router.post("/reactivate-orphaned", response_model=ReactivateResult)
async def reactivate_endpoint(
    payload: ReactivateRequest,
    db: AsyncSession = Depends(get_db),
):
    count = await reactivate_orphaned_sync_updates(db, payload.older_than_hours)
    return ReactivateResult(reactivated=count)
