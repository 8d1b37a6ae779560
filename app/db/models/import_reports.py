from sqlalchemy import Column, Integer, Numeric, String, DateTime, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base, JSONType


class ImportReport(Base):
    __tablename__ = "import_reports"

    """Report produced by one bulk import/reject of mobile orders."""

    id = Column(Uuid, primary_key=True, default=uuid4)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    operation_type = Column(String, nullable=False)  # import | reject
    operator = Column(String, nullable=False)

    orders_count = Column(Integer, nullable=False, default=0)
    total_value = Column(Numeric(18, 2), nullable=False, default=0)
    sales_reps_count = Column(Integer, nullable=False, default=0)

    report_data = Column(JSONType, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
