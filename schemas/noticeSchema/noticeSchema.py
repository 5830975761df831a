from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional

from utils.dates import as_utc


class NoticeBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    attachmentUrl: Optional[str] = None


class NoticeCreate(NoticeBase):
    publishAt: Optional[datetime] = None  # omitted -> publish on the next sweep
    isPublished: bool = False


class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    attachmentUrl: Optional[str] = None
    publishAt: Optional[datetime] = None
    isPublished: Optional[bool] = None


class NoticeResponse(NoticeBase):
    id: str
    publishAt: datetime
    isPublished: bool
    createdAt: datetime
    createdBy: int = Field(validation_alias=AliasChoices("createdById", "createdBy"))

    # stored values are naive UTC
    @field_validator("publishAt", "createdAt")
    @classmethod
    def _mark_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    class Config:
        from_attributes = True


class PaginatedNotices(BaseModel):
    data: List[NoticeResponse]
    page: int
    totalPages: int
    total: int
