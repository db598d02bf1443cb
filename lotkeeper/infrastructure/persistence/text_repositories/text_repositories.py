"""Line-oriented text stores, one file for the slots and one per earnings accumulator."""
import csv
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, List

from loguru import logger

from lotkeeper.application.repositories import AbstractSlotRepository, AbstractEarningsRepository
from lotkeeper.domain.common import EarningsPeriod, ZERO
from lotkeeper.domain.entities import Slot, Vehicle, LotLedger
from lotkeeper.domain.exceptions import MalformedPersistedRecord, PersistenceFailure
from lotkeeper.shared.custom_types import ensure_utc
from lotkeeper.shared.formatting import format_amount

SLOT_DATA_FILE = "ParkingLotData.txt"
EARNINGS_FILES: Dict[EarningsPeriod, str] = {
    EarningsPeriod.TOTAL: "TotalEarnings.txt",
    EarningsPeriod.WEEKLY: "WeeklyEarnings.txt",
    EarningsPeriod.MONTHLY: "MonthlyEarnings.txt",
}
NULL_TOKEN = "null"
STAGED_SUFFIX = ".tmp"


def format_slot_record(slot: Slot) -> List[str]:
    if slot.is_occupied:
        return [slot.label, "True", slot.occupant.license_plate, slot.occupant.entry_time.isoformat()]
    return [slot.label, "False", NULL_TOKEN, NULL_TOKEN]


def parse_slot_record(fields: List[str], source: str = SLOT_DATA_FILE, line_number: int | None = None) -> Slot:
    if len(fields) != 4:
        raise MalformedPersistedRecord(source, line_number, f"expected 4 fields, got {len(fields)}")

    label, occupied, license_plate, entry_time = fields
    if not label:
        raise MalformedPersistedRecord(source, line_number, "empty slot label")

    occupied = occupied.strip().lower()
    if occupied not in ("true", "false"):
        raise MalformedPersistedRecord(source, line_number, f"occupied flag {fields[1]!r} is not a boolean")
    if occupied == "false":
        return Slot(label)

    if license_plate == NULL_TOKEN or entry_time == NULL_TOKEN:
        raise MalformedPersistedRecord(source, line_number, "occupied slot without a vehicle")
    try:
        parsed_entry_time = datetime.fromisoformat(entry_time)
    except ValueError:
        raise MalformedPersistedRecord(source, line_number, f"bad entry time {entry_time!r}")

    return Slot(label, occupant=Vehicle(license_plate=license_plate, entry_time=ensure_utc(parsed_entry_time)))


def parse_amount(text: str, source: str) -> Decimal:
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise MalformedPersistedRecord(source, None, f"{text.strip()!r} is not a decimal amount")
    if not amount.is_finite() or amount < 0:
        raise MalformedPersistedRecord(source, None, f"{amount} is not a valid earnings amount")
    return amount


def read_record_fields(raw_line: bytes, source: str, line_number: int) -> List[str]:
    """Decode and split one line of the slot file."""
    try:
        line = raw_line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPersistedRecord(source, line_number, f"not valid UTF-8 ({e.reason})")

    # A field can be as long as its line, plates are never truncated
    previous_limit = csv.field_size_limit(max(csv.field_size_limit(), len(line)))
    try:
        return next(csv.reader([line]), [])
    except csv.Error as e:
        raise MalformedPersistedRecord(source, line_number, f"unreadable record ({e})")
    finally:
        csv.field_size_limit(previous_limit)


class TextFileSlotRepository(AbstractSlotRepository):
    def __init__(self, data_dir: str | Path, filename: str = SLOT_DATA_FILE):
        self.path = Path(data_dir) / filename

    def load(self) -> List[Slot]:
        if not self.path.exists():
            logger.debug(f"No slot data at {self.path}, starting with an empty lot")
            return []

        try:
            raw_lines = self.path.read_bytes().splitlines()
        except OSError as e:
            raise PersistenceFailure(f"Could not read {self.path}: {e}") from e

        slots = []
        for line_number, raw_line in enumerate(raw_lines, start=1):
            if not raw_line.strip():
                continue
            try:
                fields = read_record_fields(raw_line, self.path.name, line_number)
                slots.append(parse_slot_record(fields, self.path.name, line_number))
            except MalformedPersistedRecord as e:
                logger.warning(f"Skipping record: {e}")
        return slots

    def save(self, slots: Iterable[Slot]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, lineterminator="\n")
                for slot in slots:
                    writer.writerow(format_slot_record(slot))
        except OSError as e:
            raise PersistenceFailure(f"Could not write {self.path}: {e}") from e


class TextFileEarningsRepository(AbstractEarningsRepository):
    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def path_for(self, period: EarningsPeriod) -> Path:
        return self.data_dir / EARNINGS_FILES[period]

    def _load_amount(self, period: EarningsPeriod) -> Decimal:
        path = self.path_for(period)
        if not path.exists():
            return ZERO
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceFailure(f"Could not read {path}: {e}") from e
        try:
            return parse_amount(text, path.name)
        except MalformedPersistedRecord as e:
            logger.warning(f"Using zero {period.value} earnings: {e}")
            return ZERO

    def load(self) -> LotLedger:
        return LotLedger(
            total_earnings=self._load_amount(EarningsPeriod.TOTAL),
            weekly_earnings=self._load_amount(EarningsPeriod.WEEKLY),
            monthly_earnings=self._load_amount(EarningsPeriod.MONTHLY),
        )

    def save(self, ledger: LotLedger) -> None:
        """Write all three accumulators to side files first, then move them into place."""
        amounts = {
            EarningsPeriod.TOTAL: ledger.total_earnings,
            EarningsPeriod.WEEKLY: ledger.weekly_earnings,
            EarningsPeriod.MONTHLY: ledger.monthly_earnings,
        }
        staged = []
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for period, amount in amounts.items():
                path = self.path_for(period)
                staged_path = path.with_name(path.name + STAGED_SUFFIX)
                staged_path.write_text(format_amount(amount), encoding="utf-8")
                staged.append((staged_path, path))
            for staged_path, path in staged:
                staged_path.replace(path)
        except OSError as e:
            for staged_path, _ in staged:
                staged_path.unlink(missing_ok=True)
            raise PersistenceFailure(f"Could not write earnings to {self.data_dir}: {e}") from e
