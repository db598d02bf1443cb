from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from lotkeeper.domain.common import CENTS

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Two fractional digits, the format money is persisted and shown in."""
    return f"{to_cents(amount):.2f}"


def format_money(amount: Decimal, currency_symbol: str = "P") -> str:
    return f"{currency_symbol}{format_amount(amount)}"


def format_timestamp(value: datetime) -> str:
    # Aware datetimes are shown in the local timezone of the console
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(DISPLAY_TIME_FORMAT)
