import csv

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from loguru import logger

from lotkeeper.domain.entities import Slot, Vehicle, LotLedger
from lotkeeper.domain.exceptions import MalformedPersistedRecord, PersistenceFailure
from lotkeeper.domain.slot_registry import SlotRegistry
from lotkeeper.infrastructure.persistence.text_repositories.text_repositories import (
    parse_slot_record,
    read_record_fields,
    format_slot_record,
)

ENTRY = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)


class TestSlotRecordFormat:
    """Test the one-line-per-slot record."""

    def test_free_slot_record(self):
        assert format_slot_record(Slot("A1")) == ["A1", "False", "null", "null"]

    def test_occupied_slot_record(self):
        slot = Slot("B3", occupant=Vehicle("XYZ123", entry_time=ENTRY))
        assert format_slot_record(slot) == ["B3", "True", "XYZ123", "2024-05-01T10:00:00.123456+00:00"]

    def test_parse_occupied_record(self):
        slot = parse_slot_record(["A2", "True", "XYZ123", "2024-05-01T10:00:00.123456+00:00"])
        assert slot.label == "A2"
        assert slot.occupant.license_plate == "XYZ123"
        assert slot.occupant.entry_time == ENTRY

    def test_parse_free_record(self):
        slot = parse_slot_record(["A1", "false", "null", "null"])
        assert slot.is_occupied is False

    def test_parse_timestamp_with_other_offset(self):
        slot = parse_slot_record(["A1", "True", "OFF123", "2024-05-01T18:00:00+08:00"])
        assert slot.occupant.entry_time == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert slot.occupant.entry_time.tzinfo == timezone.utc

    def test_parse_seven_digit_fraction(self):
        slot = parse_slot_record(["A1", "True", "NET123", "2024-05-01T10:00:00.1234567+00:00"])
        assert slot.occupant.entry_time == ENTRY

    @pytest.mark.parametrize("fields, reason", [
        (["A1", "True", "XYZ123"], "expected 4 fields"),
        (["", "False", "null", "null"], "empty slot label"),
        (["A1", "maybe", "null", "null"], "not a boolean"),
        (["A1", "True", "null", "null"], "without a vehicle"),
        (["A1", "True", "XYZ123", "yesterday"], "bad entry time"),
    ])
    def test_malformed_records(self, fields, reason):
        with pytest.raises(MalformedPersistedRecord, match=reason):
            parse_slot_record(fields, "ParkingLotData.txt", 7)


class TestTextFileSlotRepository:
    """Test the slot data file."""

    def test_load_without_file(self, slot_repo):
        assert slot_repo.load() == []

    def test_round_trip_into_fresh_registry(self, slot_repo):
        registry = SlotRegistry(12)
        registry.park(Vehicle("AAA111", entry_time=ENTRY), "A1")
        registry.park(Vehicle("BBB222", entry_time=ENTRY - timedelta(hours=5)), "B2")
        slot_repo.save(registry.slots)

        fresh = SlotRegistry(12)
        fresh.restore(slot_repo.load())

        for original, restored in zip(registry, fresh):
            assert restored.label == original.label
            assert restored.is_occupied == original.is_occupied
            if original.is_occupied:
                assert restored.occupant.license_plate == original.occupant.license_plate
                assert restored.occupant.entry_time == original.occupant.entry_time

    def test_file_layout(self, slot_repo):
        registry = SlotRegistry(2)
        registry.park(Vehicle("XYZ123", entry_time=ENTRY), "A2")
        slot_repo.save(registry.slots)

        assert slot_repo.path.read_text().splitlines() == [
            "A1,False,null,null",
            "A2,True,XYZ123,2024-05-01T10:00:00.123456+00:00",
        ]

    def test_plate_with_comma_round_trips(self, slot_repo):
        slot_repo.save([Slot("A1", occupant=Vehicle("AB,12", entry_time=ENTRY))])
        assert slot_repo.load()[0].occupant.license_plate == "AB,12"

    def test_malformed_lines_are_skipped(self, slot_repo):
        slot_repo.path.write_text(
            "A1,True,GOOD01,2024-05-01T10:00:00+00:00\n"
            "A2,garbage\n"
            "\n"
            "A3,True,BAD001,not-a-date\n"
            "A4,False,null,null\n"
        )

        slots = slot_repo.load()

        assert [slot.label for slot in slots] == ["A1", "A4"]
        assert slots[0].occupant.license_plate == "GOOD01"

    def test_unknown_labels_in_file_are_ignored(self, slot_repo):
        slot_repo.path.write_text("Z9,True,GHOST1,2024-05-01T10:00:00+00:00\nA1,True,REAL01,2024-05-01T10:00:00+00:00\n")

        registry = SlotRegistry(3)
        registry.restore(slot_repo.load())

        assert registry.labels == ["A1", "A2", "A3"]
        assert registry.find_slot("A1").occupant.license_plate == "REAL01"
        assert registry.occupied_count == 1

    def test_unbalanced_quote_only_drops_its_record(self, slot_repo):
        slot_repo.path.write_text(
            'A1,True,"BROKEN,2024-05-01T10:00:00+00:00\n'
            "A2,True,GOOD02,2024-05-01T10:00:00+00:00\n"
        )
        warnings = []
        handler_id = logger.add(warnings.append, level="WARNING")
        try:
            slots = slot_repo.load()
        finally:
            logger.remove(handler_id)

        assert [slot.label for slot in slots] == ["A2"]
        assert slots[0].occupant.license_plate == "GOOD02"
        assert any("ParkingLotData.txt:1" in str(message) for message in warnings)

    def test_invalid_utf8_only_drops_its_record(self, slot_repo):
        slot_repo.path.write_bytes(
            b"A1,True,\xff\xfe,2024-05-01T10:00:00+00:00\n"
            b"A2,True,GOOD02,2024-05-01T10:00:00+00:00\n"
        )

        slots = slot_repo.load()

        assert [slot.label for slot in slots] == ["A2"]
        assert slots[0].occupant.license_plate == "GOOD02"

    def test_plate_longer_than_csv_field_limit(self, slot_repo):
        long_plate = "P" * (csv.field_size_limit() + 10)
        limit_before = csv.field_size_limit()
        slot_repo.save([
            Slot("A1", occupant=Vehicle(long_plate, entry_time=ENTRY)),
            Slot("A2", occupant=Vehicle("OK0001", entry_time=ENTRY)),
        ])

        slots = slot_repo.load()

        assert [slot.occupant.license_plate for slot in slots] == [long_plate, "OK0001"]
        assert csv.field_size_limit() == limit_before

    def test_undecodable_line(self):
        with pytest.raises(MalformedPersistedRecord, match="ParkingLotData.txt:3: not valid UTF-8"):
            read_record_fields(b"A1,\xc3(,null,null", "ParkingLotData.txt", 3)

    def test_unclosed_quote_runs_to_end_of_line(self):
        assert read_record_fields(b'A1,False,"null,null', "ParkingLotData.txt", 3) == ["A1", "False", "null,null"]

    def test_unreadable_file(self, slot_repo):
        slot_repo.path.mkdir()
        with pytest.raises(PersistenceFailure, match="Could not read"):
            slot_repo.load()


class TestTextFileEarningsRepository:
    """Test the three earnings files."""

    def test_missing_files_are_zero(self, earnings_repo):
        assert earnings_repo.load().as_tuple() == (0, 0, 0)

    def test_round_trip(self, earnings_repo):
        earnings_repo.save(LotLedger(Decimal("100"), Decimal("25.5"), Decimal("60.125")))

        loaded = earnings_repo.load()

        assert loaded.total_earnings == Decimal("100.00")
        assert loaded.weekly_earnings == Decimal("25.50")
        assert loaded.monthly_earnings == Decimal("60.13")

    def test_files_hold_two_decimals(self, earnings_repo, data_dir):
        earnings_repo.save(LotLedger(Decimal("100"), Decimal("7"), Decimal("0")))

        assert (data_dir / "TotalEarnings.txt").read_text() == "100.00"
        assert (data_dir / "WeeklyEarnings.txt").read_text() == "7.00"
        assert (data_dir / "MonthlyEarnings.txt").read_text() == "0.00"

    def test_single_missing_file(self, earnings_repo, data_dir):
        (data_dir / "TotalEarnings.txt").write_text("42.00")

        loaded = earnings_repo.load()

        assert loaded.total_earnings == Decimal("42.00")
        assert loaded.weekly_earnings == 0
        assert loaded.monthly_earnings == 0

    @pytest.mark.parametrize("content", ["lots", "-5.00", "NaN", ""])
    def test_malformed_value_reads_as_zero(self, earnings_repo, data_dir, content):
        (data_dir / "WeeklyEarnings.txt").write_text(content)
        (data_dir / "MonthlyEarnings.txt").write_text("3.50\n")

        loaded = earnings_repo.load()

        assert loaded.weekly_earnings == 0
        assert loaded.monthly_earnings == Decimal("3.50")

    def test_failed_save_keeps_previous_amounts(self, earnings_repo, data_dir):
        earnings_repo.save(LotLedger(Decimal("10"), Decimal("10"), Decimal("10")))
        # A directory in the way of the weekly side file makes the second write fail
        (data_dir / "WeeklyEarnings.txt.tmp").mkdir()

        with pytest.raises(PersistenceFailure, match="Could not write earnings"):
            earnings_repo.save(LotLedger(Decimal("60"), Decimal("60"), Decimal("60")))

        assert earnings_repo.load().as_tuple() == (Decimal("10.00"), Decimal("10.00"), Decimal("10.00"))
        assert not (data_dir / "TotalEarnings.txt.tmp").exists()

    def test_save_leaves_no_side_files(self, earnings_repo, data_dir):
        earnings_repo.save(LotLedger(Decimal("1"), Decimal("2"), Decimal("3")))

        assert sorted(path.name for path in data_dir.iterdir()) == [
            "MonthlyEarnings.txt",
            "TotalEarnings.txt",
            "WeeklyEarnings.txt",
        ]
