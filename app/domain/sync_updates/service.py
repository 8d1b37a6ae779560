# app/domain/sync_updates/service.py
"""Sync update markers: the desktop creates them, mobile devices poll and consume them."""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import PersistenceError, ValidationError
from app.core.guard import OperationGuard
from app.db.models.sync_updates import SyncUpdate
from app.db.repositories.sync_logs import add_sync_log
from app.db.repositories.sync_updates import (
    count_sync_updates,
    get_active_sync_updates,
    get_orphaned_sync_updates,
    get_sync_update_history,
)
from .schemas import SyncStats

logger = logging.getLogger(__name__)

consume_guard = OperationGuard("sync-update-consume")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _log_event(
    db: AsyncSession,
    event: str,
    update_id,
    data_types: Sequence[str] = (),
    user: Optional[str] = None,
    device_id: Optional[str] = None,
) -> None:
    add_sync_log(
        db,
        event_type="upload" if event == "create" else "download",
        data_type=",".join(data_types) or "sync_update",
        metadata={
            "sync_update_id": str(update_id),
            "event_type": event,
            "user_id": user,
            "device_id": device_id,
            "timestamp": _now().isoformat(),
        },
    )


async def create_sync_update(
    db: AsyncSession,
    data_types: Sequence[str],
    description: Optional[str] = None,
    created_by: Optional[str] = None,
) -> SyncUpdate:
    data_types = [t for t in data_types if t]
    if not data_types:
        raise ValidationError("At least one data type is required")

    update = SyncUpdate(
        data_types=data_types,
        description=description or ", ".join(data_types),
        is_active=True,
        created_by_user=created_by or "desktop",
        meta={
            "created_from": "desktop",
            "target": "mobile",
            "timestamp": _now().isoformat(),
        },
    )
    try:
        db.add(update)
        await db.flush()
        _log_event(db, "create", update.id, data_types, created_by)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error creating sync update for %s", data_types)
        raise PersistenceError("Could not create the sync update") from exc

    await db.refresh(update)
    logger.info("Sync update %s created for %s", update.id, ", ".join(data_types))
    return update


async def list_active_sync_updates(db: AsyncSession) -> List[SyncUpdate]:
    updates = await get_active_sync_updates(db)
    logger.debug("Found %d active sync updates", len(updates))
    return updates


async def consume_sync_update(
    db: AsyncSession,
    update_id: UUID,
    consumed_by: Optional[str] = None,
    device_id: Optional[str] = None,
) -> bool:
    """Marks the update consumed. Never raises for a missing row or a DB error; check the result."""
    with consume_guard.hold(str(update_id)) as acquired:
        if not acquired:
            return False

        try:
            update = await db.get(SyncUpdate, update_id)
            if update is None:
                logger.warning("Sync update %s not found, nothing consumed", update_id)
                return False

            now = _now()
            update.is_active = False
            update.completed_at = now
            update.meta = {
                **(update.meta or {}),
                "consumed_by": consumed_by or "mobile",
                "consumed_at": now.isoformat(),
                "device_id": device_id,
            }
            _log_event(db, "consume", update.id, user=consumed_by, device_id=device_id)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error marking sync update %s as consumed", update_id)
            return False

    logger.info("Sync update %s consumed by %s", update_id, consumed_by or "mobile")
    return True


async def reactivate_orphaned_sync_updates(
    db: AsyncSession,
    older_than_hours: Optional[float] = None,
) -> int:
    """Reactivates markers left inactive without completed_at for longer than the cutoff.

    Consumed markers (completed_at set) are never touched.
    """
    if older_than_hours is None:
        older_than_hours = settings.SYNC_ORPHAN_HOURS
    now = _now()
    cutoff = now - timedelta(hours=older_than_hours)

    try:
        orphans = await get_orphaned_sync_updates(db, cutoff)
        for update in orphans:
            update.is_active = True
            update.meta = {
                **(update.meta or {}),
                "reactivated_at": now.isoformat(),
                "reactivated_reason": "orphaned_update",
            }
            _log_event(db, "reactivate", update.id, update.data_types or ())
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error reactivating orphaned sync updates")
        return 0

    if orphans:
        logger.info("Reactivated %d orphaned sync updates older than %sh", len(orphans), older_than_hours)
    return len(orphans)


async def sync_update_history(db: AsyncSession, limit: Optional[int] = None) -> List[SyncUpdate]:
    return await get_sync_update_history(db, limit or settings.SYNC_UPDATE_HISTORY_LIMIT)


async def sync_update_stats(db: AsyncSession) -> SyncStats:
    return SyncStats(
        active=await count_sync_updates(db, SyncUpdate.is_active.is_(True)),
        consumed=await count_sync_updates(
            db, SyncUpdate.is_active.is_(False), SyncUpdate.completed_at.is_not(None)
        ),
        orphaned=await count_sync_updates(
            db, SyncUpdate.is_active.is_(False), SyncUpdate.completed_at.is_(None)
        ),
    )
