"""Data models for yachtme."""

from .article import (
    ARTICLE_CATEGORY_LABELS,
    ARTICLE_STATUS_LABELS,
    Article,
    ArticleCategory,
    ArticleFields,
    ArticleStatus,
    LocalizedArticle,
)
from .boat import (
    BOAT_TYPE_LABELS,
    FEATURE_CATEGORIES,
    Boat,
    BoatFeatures,
    BoatFields,
    BoatType,
    ExtraService,
    ExtraServiceUnit,
    LocalizedBoat,
)
from .booking import (
    BOOKING_STATUS_LABELS,
    STATUS_TRANSITIONS,
    Booking,
    BookingFields,
    BookingStatus,
)
from .customer import AVAILABLE_TAGS, Customer, CustomerFields, CustomerSource
from .service import (
    SERVICE_ICON_LABELS,
    LocalizedService,
    Service,
    ServiceFields,
    ServiceIcon,
)
from .site_setting import DEFAULT_THEME, THEME_LABELS, SiteSetting, Theme

__all__ = [
    "Boat",
    "BoatFields",
    "BoatFeatures",
    "BoatType",
    "BOAT_TYPE_LABELS",
    "FEATURE_CATEGORIES",
    "ExtraService",
    "ExtraServiceUnit",
    "LocalizedBoat",
    "Booking",
    "BookingFields",
    "BookingStatus",
    "BOOKING_STATUS_LABELS",
    "STATUS_TRANSITIONS",
    "Customer",
    "CustomerFields",
    "CustomerSource",
    "AVAILABLE_TAGS",
    "Article",
    "ArticleFields",
    "ArticleCategory",
    "ArticleStatus",
    "ARTICLE_CATEGORY_LABELS",
    "ARTICLE_STATUS_LABELS",
    "LocalizedArticle",
    "Service",
    "ServiceFields",
    "ServiceIcon",
    "SERVICE_ICON_LABELS",
    "LocalizedService",
    "SiteSetting",
    "Theme",
    "THEME_LABELS",
    "DEFAULT_THEME",
]
