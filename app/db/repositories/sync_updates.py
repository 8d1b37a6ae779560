from datetime import datetime
from typing import List
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from app.db.models.sync_updates import SyncUpdate


async def get_active_sync_updates(db: AsyncSession) -> List[SyncUpdate]:
    result = await db.execute(
        select(SyncUpdate)
        .where(SyncUpdate.is_active.is_(True))
        .order_by(SyncUpdate.created_at.desc())
    )
    return list(result.scalars().all())

async def get_orphaned_sync_updates(
    db: AsyncSession,
    created_before: datetime
) -> List[SyncUpdate]:
    """Inactive markers that were never completed and are older than ``created_before``."""
    result = await db.execute(
        select(SyncUpdate)
        .where(SyncUpdate.is_active.is_(False))
        .where(SyncUpdate.completed_at.is_(None))
        .where(SyncUpdate.created_at < created_before)
    )
    return list(result.scalars().all())

async def get_sync_update_history(db: AsyncSession, limit: int) -> List[SyncUpdate]:
    result = await db.execute(
        select(SyncUpdate).order_by(SyncUpdate.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())

async def count_sync_updates(db: AsyncSession, *criteria) -> int:
    result = await db.execute(select(func.count(SyncUpdate.id)).where(*criteria))
    return int(result.scalar() or 0)
