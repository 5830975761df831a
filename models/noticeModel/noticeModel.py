from uuid import uuid4

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from config import Base
from utils.dates import utcnow


class Notice(Base):
    __tablename__ = "notices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    attachmentUrl = Column(String(1024), nullable=True)
    publishAt = Column(DateTime, nullable=False, default=utcnow, index=True)
    isPublished = Column(Boolean, nullable=False, default=False, index=True)
    createdById = Column(Integer, ForeignKey("users.id"), nullable=False)
    createdAt = Column(DateTime, nullable=False, default=utcnow)

    createdBy = relationship("AuthUser", back_populates="notices")
