from sqlalchemy import Column, ForeignKey, Index, Integer, String, DateTime, Numeric, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    """Represents a single product line within an order.

    The product name/code and the agreed price are copied on the line so that
    reports do not depend on the mutable catalog. (product_id, unit) identifies
    a line: adding the same product in the same unit merges into it.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    line_number = Column(Integer, nullable=False, default=1)

    product_id = Column(Uuid, nullable=True, index=True)
    product_name = Column(String, nullable=False)
    product_code = Column(Integer, nullable=True)

    quantity = Column(Numeric(18, 3), nullable=False, default=1)
    unit_price = Column(Numeric(18, 2), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    discount = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False)

    unit = Column(String, nullable=False, default="UN")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        Index("ix_order_items_order_product", "order_id", "product_id", "unit"),
        Index("ix_order_items_order_line", "order_id", "line_number"),
    )
