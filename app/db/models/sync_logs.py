# app/db/models/sync_logs.py
from sqlalchemy import Column, Index, Integer, String, DateTime, Uuid
from sqlalchemy.sql import func
import uuid

from app.db.base import Base, JSONType


class SyncLog(Base):
    __tablename__ = "sync_logs"

    """Append-only audit record of every exchange with the mobile devices.

    event_type is "upload" (desktop/device pushed data), "download" (device
    consumed data) or "sync" (device pulled a data set).
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sales_rep_id = Column(Uuid, nullable=True, index=True)

    event_type = Column(String, nullable=False)
    data_type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="completed")
    records_count = Column(Integer, nullable=False, default=0)

    meta = Column("metadata", JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_sync_logs_event_created", "event_type", "created_at"),
    )
