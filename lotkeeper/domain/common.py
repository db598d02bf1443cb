from decimal import Decimal
from enum import Enum


class SlotState(str, Enum):
    FREE = "free"
    OCCUPIED = "occupied"


class EarningsPeriod(str, Enum):
    TOTAL = "total"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


ZERO = Decimal("0")
CENTS = Decimal("0.01")
