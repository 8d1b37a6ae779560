# app/domain/order_items/schemas.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional

class AddItem(BaseModel):
    product_id: UUID
    quantity: Decimal
    price: Decimal
    unit: Optional[str] = None
    operation_id: Optional[str] = None

class OrderItemOut(BaseModel):
    id: UUID
    product_id: Optional[UUID]
    product_name: str
    product_code: Optional[int]
    quantity: Decimal
    unit_price: Decimal
    price: Decimal
    discount: Decimal
    total: Decimal
    unit: str

    class Config:
        from_attributes = True

class OrderOut(BaseModel):
    id: UUID
    code: Optional[int]
    customer_id: Optional[UUID]
    customer_name: str
    sales_rep_id: Optional[UUID]
    sales_rep_name: Optional[str]
    date: Optional[datetime]
    total: Decimal
    discount: Decimal
    status: str
    payment_method: Optional[str]
    source_project: str
    import_status: Optional[str]
    imported_at: Optional[datetime]
    imported_by: Optional[str]
    mobile_order_id: Optional[str]
    rejection_reason: Optional[str]
    items: List[OrderItemOut] = []

    class Config:
        from_attributes = True
