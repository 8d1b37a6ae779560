# app/db/models/products.py
from sqlalchemy import Boolean, Column, Integer, Numeric, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base


class Product(Base):
    __tablename__ = "products"

    """Represents a sellable product of the catalog pushed to the mobile devices."""

    id = Column(Uuid, primary_key=True, default=uuid4)
    code = Column(Integer, nullable=False, unique=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String, nullable=False, default="UN")

    price = Column(Numeric(18, 2), nullable=False, default=0)
    stock = Column(Numeric(18, 3), nullable=False, default=0)

    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
