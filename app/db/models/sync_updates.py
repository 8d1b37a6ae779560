from sqlalchemy import Boolean, Column, Index, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base, JSONType


class SyncUpdate(Base):
    __tablename__ = "sync_updates"

    """Marker telling mobile devices that some data types changed on the desktop.

    A marker is created active, polled by the devices and consumed (inactive
    with completed_at) once a device re-synced. An inactive marker without
    completed_at never reached a device and may be reactivated.
    """

    id = Column(Uuid, primary_key=True, default=uuid4)
    data_types = Column(JSONType, nullable=False, default=list)
    description = Column(Text, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_by_user = Column(String, nullable=True)

    meta = Column("metadata", JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_sync_updates_active_created", "is_active", "created_at"),
    )
