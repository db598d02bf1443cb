"""Console tables for the parking menu."""
from typing import List, Tuple

from lotkeeper.domain.common import EarningsPeriod
from lotkeeper.schemas.snapshots import ParkResult, ExitResult, LotMap, EarningsSnapshot

BORDER = "+----------------------+----------------------+"
HEADER = "|       Details        |       Values         |"
KEY_WIDTH = 21
VALUE_WIDTH = 21


def render_details(rows: List[Tuple[str, str]]) -> str:
    lines = [BORDER, HEADER, BORDER]
    for key, value in rows:
        lines.append(f"| {key.ljust(KEY_WIDTH)}| {value.ljust(VALUE_WIDTH)}|")
    lines.append(BORDER)
    return "\n".join(lines)


def render_park_result(result: ParkResult) -> str:
    return render_details([
        ("Slot Label", result.slot_label),
        ("Vehicle License Plate", result.license_plate),
        ("Entry Time", result.entry_time_display),
    ])


def render_exit_result(result: ExitResult) -> str:
    return render_details([
        ("Slot Label", result.slot_label),
        ("Vehicle License Plate", result.license_plate),
        ("Entry Time", result.entry_time_display),
        ("Exit Time", result.exit_time_display),
        ("Duration (hours)", result.duration_display),
        ("Parking Fee", result.fee_display),
    ])


def render_lot_map(lot_map: LotMap, slots_per_row: int = 10) -> str:
    lines = ["Parking Lot Map:"]
    for row in lot_map.rows(slots_per_row):
        lines.append("".join(f"| {cell.label} [{cell.marker}] " for cell in row) + "|")
    return "\n".join(lines)


def render_earnings(snapshot: EarningsSnapshot, period: EarningsPeriod) -> str:
    labels = {
        EarningsPeriod.TOTAL: ("Total Earnings", snapshot.total_display),
        EarningsPeriod.WEEKLY: ("Weekly Earnings", snapshot.weekly_display),
        EarningsPeriod.MONTHLY: ("Monthly Earnings", snapshot.monthly_display),
    }
    title, value = labels[period]
    return f"{title}: {value}"
