from .notification_schemas import (
    NotificationCreate,
    NotificationFilters,
    NotificationItem,
    NotificationPage,
    PageLink,
    Pagination,
    RestaurantPreview,
)

__all__ = [
    "NotificationCreate",
    "NotificationFilters",
    "NotificationItem",
    "NotificationPage",
    "PageLink",
    "Pagination",
    "RestaurantPreview",
]
