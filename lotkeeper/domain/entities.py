from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from lotkeeper.domain.common import SlotState, ZERO


class Vehicle:
    def __init__(self, license_plate: str, entry_time: Optional[datetime] = None):
        self.license_plate = license_plate
        self.entry_time = entry_time if entry_time is not None else datetime.now(timezone.utc)

    def __repr__(self):
        return f"Vehicle(license_plate={self.license_plate!r}, entry_time={self.entry_time.isoformat()!r})"


class Slot:
    def __init__(self, label: str, occupant: Optional[Vehicle] = None):
        self._label = label
        self.occupant = occupant

    @property
    def label(self) -> str:
        return self._label

    @property
    def is_occupied(self) -> bool:
        return self.occupant is not None

    @property
    def state(self) -> SlotState:
        return SlotState.OCCUPIED if self.is_occupied else SlotState.FREE

    def __repr__(self):
        return f"Slot(label={self._label!r}, occupant={self.occupant!r})"


class LotLedger:
    def __init__(
        self,
        total_earnings: Decimal = ZERO,
        weekly_earnings: Decimal = ZERO,
        monthly_earnings: Decimal = ZERO,
    ):
        self.total_earnings = total_earnings
        self.weekly_earnings = weekly_earnings
        self.monthly_earnings = monthly_earnings

    def as_tuple(self) -> tuple[Decimal, Decimal, Decimal]:
        return self.total_earnings, self.weekly_earnings, self.monthly_earnings
