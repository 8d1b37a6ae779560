# app/api/deps.py
from typing import Optional
from uuid import UUID
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthError
from app.db.base import get_db
from app.domain.mobile_edge.auth import validate_api_token


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return value.strip()


async def require_sales_rep(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> UUID:
    """Sales rep id of the device calling a mobile endpoint."""
    token = bearer_token(authorization)
    if not token:
        raise AuthError("Authorization token required")

    sales_rep_id = await validate_api_token(db, token)
    if sales_rep_id is None:
        raise AuthError("Invalid or expired token")
    return sales_rep_id
