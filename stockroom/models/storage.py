# stockroom/models/storage.py
from sqlalchemy import Column, DateTime, String, Text, func
from stockroom.database import Base

# Model StorageItem
# Device-local key/value pairs (the persisted session lives under one key).
class StorageItem(Base):
    __tablename__ = "storage_items"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
