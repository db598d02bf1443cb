import datetime
from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.dialects.sqlite import DATETIME as SQLITE_DATETIME


def ensure_utc(value: datetime.datetime) -> datetime.datetime:
    """Convert to an aware UTC datetime, reading naive values as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(datetime.timezone.utc)


class UTCDateTime(TypeDecorator):
    """Stores entry times as naive UTC and hands them back UTC-aware.

    SQLite has no timezone support, so the offset is normalized away on the
    way in and reattached on the way out.
    """
    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'sqlite':
            return dialect.type_descriptor(SQLITE_DATETIME())
        return dialect.type_descriptor(DateTime(timezone=True))

    def process_bind_param(self, value: datetime.datetime | None, dialect) -> datetime.datetime | None:
        if value is None:
            return None
        return ensure_utc(value).replace(tzinfo=None)

    def process_result_value(self, value: datetime.datetime | None, dialect) -> datetime.datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
