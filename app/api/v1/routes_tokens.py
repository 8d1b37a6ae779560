# app/api/v1/routes_tokens.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.domain.mobile_edge.auth import generate_api_token, list_api_tokens, revoke_api_token
from app.domain.mobile_edge.schemas import ApiTokenOut, TokenCreate


router = APIRouter(prefix="/api/v1", tags=["api-tokens"])


@router.post("/sales-reps/{sales_rep_id}/tokens", response_model=ApiTokenOut)
async def create_token_endpoint(
    sales_rep_id: UUID,
    payload: TokenCreate,
    db: AsyncSession = Depends(get_db),
):
    return await generate_api_token(db, sales_rep_id, payload.name, payload.expires_days)

@router.get("/sales-reps/{sales_rep_id}/tokens", response_model=List[ApiTokenOut])
async def list_tokens_endpoint(
    sales_rep_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await list_api_tokens(db, sales_rep_id)

@router.delete("/tokens/{token_id}", response_model=ApiTokenOut)
async def revoke_token_endpoint(
    token_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    return await revoke_api_token(db, token_id)
