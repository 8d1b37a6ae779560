from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base


class Customer(Base):
    __tablename__ = "customers"

    """Represents a customer visited by one sales rep.

    Mobile devices only receive the active customers assigned to the
    authenticated rep, ordered by name.
    """

    id = Column(Uuid, primary_key=True, default=uuid4)
    code = Column(Integer, nullable=True)
    name = Column(String, nullable=False)
    document = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)

    sales_rep_id = Column(Uuid, ForeignKey("sales_reps.id", ondelete="SET NULL"), nullable=True)
    visit_sequence = Column(Integer, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_customers_sales_rep_active", "sales_rep_id", "active"),
    )
