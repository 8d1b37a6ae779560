from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.sync_logs import SyncLog


def add_sync_log(
    db: AsyncSession,
    *,
    event_type: str,
    data_type: str,
    sales_rep_id: Optional[UUID] = None,
    records_count: int = 0,
    status: str = "completed",
    metadata: Optional[Dict[str, Any]] = None,
) -> SyncLog:
    """Stages an audit row on ``db``; it is written with the caller's commit."""
    entry = SyncLog(
        sales_rep_id=sales_rep_id,
        event_type=event_type,
        data_type=data_type,
        status=status,
        records_count=records_count,
        meta=metadata,
    )
    db.add(entry)
    return entry
