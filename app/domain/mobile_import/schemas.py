# app/domain/mobile_import/schemas.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional

from app.domain.order_items.schemas import OrderOut

class MobileOrderGroupOut(BaseModel):
    sales_rep_id: str
    sales_rep_name: str
    total_value: Decimal
    count: int
    orders: List[OrderOut]

    class Config:
        from_attributes = True

class PendingOrdersOut(BaseModel):
    orders: List[OrderOut]
    groups: List[MobileOrderGroupOut]
    total_value: Decimal

class ImportRequest(BaseModel):
    order_ids: List[UUID] = []
    sales_rep_ids: List[str] = []
    operator: str = "admin"

class ImportReportRecordOut(BaseModel):
    id: UUID
    timestamp: datetime
    operation_type: str
    operator: str
    orders_count: int
    total_value: Decimal
    sales_reps_count: int

    class Config:
        from_attributes = True
