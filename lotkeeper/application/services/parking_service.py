from datetime import datetime, timezone

from loguru import logger

from lotkeeper.application.repositories import AbstractSlotRepository, AbstractEarningsRepository
from lotkeeper.domain.entities import Vehicle
from lotkeeper.domain.exceptions import PersistenceFailure, SlotNotFoundOrEmpty
from lotkeeper.domain.ledger import LedgerEngine
from lotkeeper.domain.slot_registry import SlotRegistry
from lotkeeper.schemas.snapshots import ParkResult, ExitResult, LotMap, SlotCell


class ParkingService:
    def __init__(
        self,
        registry: SlotRegistry,
        ledger_engine: LedgerEngine,
        slot_repo: AbstractSlotRepository,
        earnings_repo: AbstractEarningsRepository,
        currency_symbol: str = "P",
    ):
        self.registry = registry
        self.ledger_engine = ledger_engine
        self.slot_repo = slot_repo
        self.earnings_repo = earnings_repo
        self.currency_symbol = currency_symbol

    def load_state(self):
        """Restore occupancy and earnings saved by a previous run."""
        restored = self.registry.restore(self.slot_repo.load())
        self.ledger_engine.load(self.earnings_repo.load())
        logger.debug(
            f"Loaded state: {restored} slot records, "
            f"{self.registry.occupied_count} occupied of {len(self.registry)}"
        )

    def park_vehicle(self, license_plate: str, slot_label: str) -> ParkResult:
        vehicle = Vehicle(license_plate=license_plate, entry_time=datetime.now(timezone.utc))
        slot = self.registry.park(vehicle, slot_label)

        result = ParkResult(
            slot_label=slot.label,
            license_plate=vehicle.license_plate,
            entry_time=vehicle.entry_time,
        )
        logger.info(f"Vehicle {license_plate} parked at slot {slot.label}")

        self._save_slots(result)
        return result

    def exit_vehicle(self, slot_label: str) -> ExitResult:
        slot = self.registry.find_slot(slot_label)
        if slot is None or not slot.is_occupied:
            logger.debug(f"Exit refused for slot {slot_label}: unknown or empty")
            raise SlotNotFoundOrEmpty(slot_label)

        vehicle = slot.occupant
        exit_time = datetime.now(timezone.utc)
        duration = exit_time - vehicle.entry_time
        duration_hours = self.ledger_engine.duration_hours(duration)
        fee = self.ledger_engine.compute_fee(duration)

        self.ledger_engine.record_earning(fee)
        self.registry.release(slot_label)

        result = ExitResult(
            slot_label=slot.label,
            license_plate=vehicle.license_plate,
            entry_time=vehicle.entry_time,
            exit_time=exit_time,
            duration_hours=duration_hours,
            fee=fee,
            currency_symbol=self.currency_symbol,
        )
        logger.info(f"Vehicle {vehicle.license_plate} left slot {slot.label}. Fee: {result.fee_display}")

        # Both stores are attempted even if the first one fails
        failures = []
        for repo, state, what in (
            (self.slot_repo, self.registry.slots, "Slot state"),
            (self.earnings_repo, self.ledger_engine.ledger, "Earnings"),
        ):
            failure = self._try_save(repo, state, what)
            if failure is not None:
                failures.append(failure)

        if failures:
            raise PersistenceFailure("; ".join(str(f) for f in failures), result=result) from failures[0]
        return result

    def get_lot_map(self) -> LotMap:
        return LotMap(cells=[SlotCell.model_validate(slot) for slot in self.registry])

    def _save_slots(self, result):
        failure = self._try_save(self.slot_repo, self.registry.slots, "Slot state")
        if failure is not None:
            raise PersistenceFailure(str(failure), result=result) from failure

    @staticmethod
    def _try_save(repo, state, what: str):
        # The in-memory change stays applied whether or not the save succeeds
        try:
            repo.save(state)
        except PersistenceFailure as e:
            logger.error(f"{what} not saved: {e}")
            return e
        return None
