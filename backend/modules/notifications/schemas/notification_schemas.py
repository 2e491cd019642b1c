# backend/modules/notifications/schemas/notification_schemas.py

"""
Pydantic schemas for notification creation and listing.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Optional

from ..audience import parse_target_audience
from ..models.notification_models import NotificationCreator, NotificationKind

# Fields a caller may sort on or select
NOTIFICATION_FIELDS = {
    "id",
    "title",
    "message",
    "creator_id",
    "created_by",
    "restaurant_id",
    "target_audience",
    "kind",
    "recipient_id",
    "publish_at",
    "created_at",
}


class NotificationCreate(BaseModel):
    """Schema for creating a notification"""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    target_audience: Optional[str] = None
    publish_at: Optional[datetime] = None

    @field_validator("target_audience")
    @classmethod
    def validate_target_audience(cls, v):
        if v is None:
            return v
        return parse_target_audience(v).to_storage()


class NotificationFilters(BaseModel):
    """Caller-supplied filters applied after the role-based audience predicate"""

    created_by: Optional[NotificationCreator] = None
    target_audience: Optional[str] = None
    kind: Optional[NotificationKind] = None
    restaurant_id: Optional[int] = None
    sort: Optional[str] = Field(None, description="Comma-separated fields, '-' prefix for descending")
    select: Optional[str] = Field(None, description="Comma-separated fields to return")

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v):
        if v is None:
            return v
        for field in v.split(","):
            name = field.strip().lstrip("-")
            if name not in NOTIFICATION_FIELDS:
                raise ValueError(f"Cannot sort by '{name}'")
        return v

    @field_validator("select")
    @classmethod
    def validate_select(cls, v):
        if v is None:
            return v
        for field in v.split(","):
            if field.strip() not in NOTIFICATION_FIELDS:
                raise ValueError(f"Cannot select '{field.strip()}'")
        return v

    def sort_fields(self) -> List[str]:
        return [f.strip() for f in (self.sort or "-created_at").split(",") if f.strip()]

    def select_fields(self) -> Optional[List[str]]:
        if not self.select:
            return None
        return [f.strip() for f in self.select.split(",") if f.strip()]


class RestaurantPreview(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    tel: Optional[str] = None
    province: Optional[str] = None
    img_path: Optional[str] = None


class NotificationItem(BaseModel):
    """Notification as returned by the listing; unselected fields are None"""

    id: Optional[int] = None
    title: Optional[str] = None
    message: Optional[str] = None
    creator_id: Optional[int] = None
    created_by: Optional[NotificationCreator] = None
    restaurant_id: Optional[int] = None
    target_audience: Optional[str] = None
    kind: Optional[NotificationKind] = None
    recipient_id: Optional[int] = None
    publish_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    restaurant: Optional[RestaurantPreview] = None


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


class NotificationPage(BaseModel):
    """Paginated notification listing"""

    count: int
    total: int
    pagination: Pagination
    items: List[NotificationItem]
