# app/domain/sync_updates/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from uuid import UUID
from typing import Any, Dict, List, Optional

class SyncUpdateCreate(BaseModel):
    data_types: List[str]
    description: Optional[str] = None
    created_by: Optional[str] = None

class SyncUpdateCreated(BaseModel):
    id: UUID

class SyncUpdateConsume(BaseModel):
    consumed_by: Optional[str] = None
    device_id: Optional[str] = None

class ConsumeResult(BaseModel):
    success: bool

class ReactivateRequest(BaseModel):
    older_than_hours: Optional[float] = None

class ReactivateResult(BaseModel):
    reactivated: int

class SyncStats(BaseModel):
    active: int
    consumed: int
    orphaned: int

class SyncUpdateOut(BaseModel):
    id: UUID
    data_types: List[str]
    description: Optional[str]
    is_active: bool
    created_at: datetime
    completed_at: Optional[datetime]
    created_by_user: Optional[str]
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="meta")

    class Config:
        from_attributes = True
