from sqlalchemy import Boolean, Column, ForeignKey, String, DateTime, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from app.db.base import Base


class ApiToken(Base):
    __tablename__ = "api_tokens"

    """Bearer token handed to a sales rep's mobile device."""

    id = Column(Uuid, primary_key=True, default=uuid4)
    token = Column(String, nullable=False, unique=True, index=True)
    sales_rep_id = Column(Uuid, ForeignKey("sales_reps.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)

    expires_at = Column(DateTime(timezone=True), nullable=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
