from sqlalchemy import Boolean, Column, Integer, String, DateTime, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base


class SalesRep(Base):
    __tablename__ = "sales_reps"

    id = Column(Uuid, primary_key=True, default=uuid4)
    code = Column(Integer, nullable=False, unique=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
