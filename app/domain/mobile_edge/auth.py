# app/domain/mobile_edge/auth.py
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.db.models.api_tokens import ApiToken
from app.db.repositories.api_tokens import get_token_by_id, get_token_by_value, get_tokens_for_sales_rep
from app.db.repositories.catalog import get_sales_rep_by_id

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # sqlite hands timestamps back without tzinfo
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def validate_api_token(db: AsyncSession, token: str) -> Optional[UUID]:
    """Maps a bearer token to its sales rep id, or None when it must be refused."""
    if not token:
        return None

    row = await get_token_by_value(db, token)
    if row is None or not row.is_active:
        return None

    now = datetime.now(timezone.utc)
    if row.expires_at is not None and _as_utc(row.expires_at) <= now:
        logger.info("Refused expired token %s of sales rep %s", row.id, row.sales_rep_id)
        return None

    rep = await get_sales_rep_by_id(db, row.sales_rep_id)
    if rep is None or not rep.active:
        return None

    row.last_used_at = now
    await db.commit()
    return row.sales_rep_id


async def generate_api_token(
    db: AsyncSession,
    sales_rep_id: UUID,
    name: str,
    expires_days: Optional[int] = None,
) -> ApiToken:
    if not name or not name.strip():
        raise ValidationError("Token name is required")
    if await get_sales_rep_by_id(db, sales_rep_id) is None:
        raise NotFoundError("Sales rep not found")

    expires_days = expires_days or settings.API_TOKEN_DEFAULT_DAYS
    token = ApiToken(
        token=secrets.token_urlsafe(settings.API_TOKEN_BYTES),
        sales_rep_id=sales_rep_id,
        name=name.strip(),
        expires_at=datetime.now(timezone.utc) + timedelta(days=expires_days) if expires_days else None,
        is_active=True,
    )
    db.add(token)
    await db.commit()
    await db.refresh(token)
    logger.info("Generated API token %s for sales rep %s", token.id, sales_rep_id)
    return token


async def list_api_tokens(db: AsyncSession, sales_rep_id: UUID) -> List[ApiToken]:
    return await get_tokens_for_sales_rep(db, sales_rep_id)


async def revoke_api_token(db: AsyncSession, token_id: UUID) -> ApiToken:
    token = await get_token_by_id(db, token_id)
    if token is None:
        raise NotFoundError("Token not found")
    token.is_active = False
    await db.commit()
    await db.refresh(token)
    return token
