# app/domain/mobile_edge/schemas.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from uuid import UUID
from typing import Any, List, Optional

class MobileOrderItemIn(BaseModel):
    product_id: Optional[UUID] = None
    product_name: str
    product_code: Optional[int] = None
    quantity: Decimal
    unit: Optional[str] = None
    unit_price: Decimal
    price: Optional[Decimal] = None
    discount: Decimal = Decimal(0)
    total: Optional[Decimal] = None

class MobileOrderIn(BaseModel):
    customer_id: Optional[UUID] = None
    customer_name: str = ""
    sales_rep_name: Optional[str] = None
    date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    total: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    status: Optional[str] = None
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    payment_table: Optional[str] = None
    notes: Optional[str] = None
    delivery_address: Optional[str] = None
    rejection_reason: Optional[str] = None
    mobile_order_id: Optional[str] = None
    items: List[MobileOrderItemIn] = []

class MobileOrderCreated(BaseModel):
    success: bool = True
    orderId: UUID

class SyncOrderItemIn(MobileOrderItemIn):
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class SyncOrderIn(MobileOrderIn):
    """Order pushed by a device in camelCase; ``id`` is the device-local id."""

    id: str
    items: List[SyncOrderItemIn] = []

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class SyncOrdersRequest(BaseModel):
    salesRepId: Optional[UUID] = None
    deviceId: Optional[str] = None
    orders: List[SyncOrderIn] = []

class ProcessedOrder(BaseModel):
    localId: str
    serverId: Optional[UUID] = None
    code: Optional[int] = None
    status: str
    error: Optional[str] = None

class SyncOrdersResult(BaseModel):
    success: bool = True
    processed: List[ProcessedOrder]
    syncedAt: datetime

class ConsumeSyncUpdateRequest(BaseModel):
    updateId: UUID
    deviceId: Optional[str] = None

class SyncDataOut(BaseModel):
    success: bool = True
    data: Any
    timestamp: datetime

class CustomerOut(BaseModel):
    id: UUID
    code: Optional[int]
    name: str
    document: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    sales_rep_id: Optional[UUID]
    visit_sequence: Optional[int]

    class Config:
        from_attributes = True

class ProductOut(BaseModel):
    id: UUID
    code: int
    name: str
    unit: str
    price: Decimal
    stock: Decimal

    class Config:
        from_attributes = True

class SalesRepOut(BaseModel):
    id: UUID
    code: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    active: bool

    class Config:
        from_attributes = True

class TokenCreate(BaseModel):
    name: str
    expires_days: Optional[int] = None

class ApiTokenOut(BaseModel):
    id: UUID
    token: str
    sales_rep_id: UUID
    name: str
    expires_at: Optional[datetime]
    last_used_at: Optional[datetime]
    is_active: bool

    class Config:
        from_attributes = True
