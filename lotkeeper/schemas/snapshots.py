from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lotkeeper.shared.formatting import format_amount, format_money, format_timestamp


def _make_datetime_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class ParkResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot_label: str
    license_plate: str
    entry_time: datetime

    @field_validator('entry_time')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        return _make_datetime_aware(dt)

    @property
    def entry_time_display(self) -> str:
        return format_timestamp(self.entry_time)


class ExitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot_label: str
    license_plate: str
    entry_time: datetime
    exit_time: datetime
    duration_hours: Decimal = Field(..., ge=0)
    fee: Decimal = Field(..., ge=0)
    currency_symbol: str = "P"

    @field_validator('entry_time', 'exit_time')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        return _make_datetime_aware(dt)

    @property
    def entry_time_display(self) -> str:
        return format_timestamp(self.entry_time)

    @property
    def exit_time_display(self) -> str:
        return format_timestamp(self.exit_time)

    @property
    def duration_display(self) -> str:
        return format_amount(self.duration_hours)

    @property
    def fee_display(self) -> str:
        return format_money(self.fee, self.currency_symbol)


class SlotCell(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    label: str
    is_occupied: bool

    @property
    def marker(self) -> str:
        return "X" if self.is_occupied else "O"


class LotMap(BaseModel):
    model_config = ConfigDict(frozen=True)

    cells: List[SlotCell]

    @property
    def occupied_labels(self) -> List[str]:
        return [cell.label for cell in self.cells if cell.is_occupied]

    def rows(self, width: int = 10) -> List[List[SlotCell]]:
        if width <= 0:
            raise ValueError("width must be positive")
        return [self.cells[i:i + width] for i in range(0, len(self.cells), width)]


class EarningsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: Decimal = Field(..., ge=0)
    weekly: Decimal = Field(..., ge=0)
    monthly: Decimal = Field(..., ge=0)
    currency_symbol: str = "P"

    @property
    def total_display(self) -> str:
        return format_money(self.total, self.currency_symbol)

    @property
    def weekly_display(self) -> str:
        return format_money(self.weekly, self.currency_symbol)

    @property
    def monthly_display(self) -> str:
        return format_money(self.monthly, self.currency_symbol)
