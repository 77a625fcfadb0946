# app/models/storage_entry.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from app.database import Base


class StorageEntry(Base):
    """One key/value pair of the browser-style report store"""
    __tablename__ = "storage_entries"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
