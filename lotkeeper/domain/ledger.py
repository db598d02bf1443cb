from datetime import timedelta
from decimal import Decimal
from typing import Optional

from loguru import logger

from lotkeeper.domain.common import ZERO
from lotkeeper.domain.entities import LotLedger

DEFAULT_HOURLY_RATE = Decimal("50")
MICROSECONDS_PER_HOUR = Decimal(3600 * 10**6)


class LedgerEngine:
    def __init__(self, hourly_rate: Decimal = DEFAULT_HOURLY_RATE, ledger: Optional[LotLedger] = None):
        hourly_rate = Decimal(str(hourly_rate))
        if hourly_rate < 0:
            raise ValueError(f"hourly_rate must not be negative, got {hourly_rate}")
        self.hourly_rate = hourly_rate
        self.ledger = ledger if ledger is not None else LotLedger()

    def duration_hours(self, duration: timedelta) -> Decimal:
        """Exact length of ``duration`` in hours, negative durations count as zero."""
        if duration < timedelta(0):
            logger.warning(f"Negative parking duration {duration}, charging as zero")
            return ZERO
        microseconds = (duration.days * 86400 + duration.seconds) * 10**6 + duration.microseconds
        return Decimal(microseconds) / MICROSECONDS_PER_HOUR

    def compute_fee(self, duration: timedelta) -> Decimal:
        return self.hourly_rate * self.duration_hours(duration)

    def record_earning(self, fee: Decimal):
        if fee < 0:
            raise ValueError(f"Cannot record a negative fee: {fee}")
        self.ledger.total_earnings += fee
        self.ledger.weekly_earnings += fee
        self.ledger.monthly_earnings += fee

    def load(self, ledger: LotLedger):
        self.ledger = ledger

    def snapshot(self) -> tuple[Decimal, Decimal, Decimal]:
        return self.ledger.as_tuple()
