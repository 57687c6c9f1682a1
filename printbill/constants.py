from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from printbill.settings import settings

UTC = timezone.utc
LOCAL_TZ = ZoneInfo(settings.timezone)

CONTENT_TYPE_EXTENSIONS = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}

# Search fields shared by every repository backend.
SEARCH_FIELDS = ("customer_name", "print_name")


def format_date(value: datetime) -> str:
    """Short local date for invoices and listings: 2025-03-10T20:00Z -> '11/03/2025'."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(LOCAL_TZ).strftime(settings.date_format)
