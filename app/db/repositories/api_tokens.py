from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from app.db.models.api_tokens import ApiToken


async def get_token_by_value(db: AsyncSession, token: str) -> Optional[ApiToken]:
    result = await db.execute(select(ApiToken).where(ApiToken.token == token))
    return result.scalar_one_or_none()

async def get_token_by_id(db: AsyncSession, token_id: UUID) -> Optional[ApiToken]:
    result = await db.execute(select(ApiToken).where(ApiToken.id == token_id))
    return result.scalar_one_or_none()

async def get_tokens_for_sales_rep(db: AsyncSession, sales_rep_id: UUID) -> List[ApiToken]:
    result = await db.execute(
        select(ApiToken)
        .where(ApiToken.sales_rep_id == sales_rep_id)
        .order_by(ApiToken.created_at.desc())
    )
    return list(result.scalars().all())
