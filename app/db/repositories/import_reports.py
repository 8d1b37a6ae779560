from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from app.db.models.import_reports import ImportReport


async def get_import_reports(db: AsyncSession, limit: int = 50) -> List[ImportReport]:
    result = await db.execute(
        select(ImportReport).order_by(ImportReport.timestamp.desc()).limit(limit)
    )
    return list(result.scalars().all())

async def get_import_report_by_id(db: AsyncSession, report_id: UUID) -> Optional[ImportReport]:
    result = await db.execute(select(ImportReport).where(ImportReport.id == report_id))
    return result.scalar_one_or_none()
