from sqlalchemy import Column, Index, Integer, String, DateTime, Numeric, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class Order(Base):
    __tablename__ = "orders"

    """Represents a sales order header, typed by the back office or sent by a mobile device.

    Orders coming from the sales force arrive with source_project="mobile" and
    import_status="pending" and stay out of the regular order flow until they
    are imported (moved to source_project="admin") or rejected.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(Integer, nullable=True, index=True)

    customer_id = Column(Uuid, nullable=True, index=True)
    customer_name = Column(String, nullable=False, default="")
    sales_rep_id = Column(Uuid, nullable=True, index=True)
    sales_rep_name = Column(String, nullable=True)

    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    due_date = Column(DateTime(timezone=True), nullable=True)
    delivery_date = Column(DateTime(timezone=True), nullable=True)

    total = Column(Numeric(18, 2), nullable=False, default=0)
    discount = Column(Numeric(18, 2), nullable=False, default=0)

    status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")
    payment_method = Column(String, nullable=True)
    payment_table = Column(String, nullable=True)

    notes = Column(Text, nullable=True)
    delivery_address = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    source_project = Column(String, nullable=False, default="admin")
    import_status = Column(String, nullable=True)
    imported_at = Column(DateTime(timezone=True), nullable=True)
    imported_by = Column(String, nullable=True)
    mobile_order_id = Column(String, nullable=True, index=True)
    device_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.line_number",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_orders_source_import_status", "source_project", "import_status"),
    )
