from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from remindpay.utils.timezone import to_utc_aware, to_utc_naive


class UTCDateTime(TypeDecorator):
    """Stores instants as UTC-naive timestamps and hands them back UTC-aware.

    Keeps comparisons in SQL consistent across PostgreSQL and SQLite, which
    has no native timezone support.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return to_utc_naive(value)

    def process_result_value(self, value, dialect):
        return to_utc_aware(value)
