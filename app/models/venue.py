"""
Venue model
"""

import uuid
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Index

from app.core.db import Base
from app.utils.dates import utcnow

class Venue(Base):
    __tablename__ = "venues"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    facilities = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Resolver looks venues up by this pair
    __table_args__ = (Index("ix_venues_name_street", "name", "street"),)
