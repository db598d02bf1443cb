from typing import Dict, Iterable, Iterator, List, Optional

from loguru import logger

from lotkeeper.domain.entities import Slot, Vehicle
from lotkeeper.domain.exceptions import SlotNotFound, SlotOccupied, SlotNotFoundOrEmpty

COLUMNS_PER_ROW = 10


def generate_labels(total_slots: int) -> List[str]:
    """Row letter from 'A', column 1..10, next row every 10 slots: A1..A10, B1, ..."""
    labels = []
    row = ord("A")
    column = 1
    for _ in range(total_slots):
        labels.append(f"{chr(row)}{column}")
        column += 1
        if column > COLUMNS_PER_ROW:
            column = 1
            row += 1
    return labels


class SlotRegistry:
    def __init__(self, total_slots: int):
        if isinstance(total_slots, bool) or not isinstance(total_slots, int) or total_slots <= 0:
            raise ValueError(f"total_slots must be a positive integer, got {total_slots!r}")

        self.total_slots = total_slots
        self._slots: List[Slot] = [Slot(label) for label in generate_labels(total_slots)]
        self._by_label: Dict[str, Slot] = {slot.label: slot for slot in self._slots}

    @property
    def slots(self) -> List[Slot]:
        return list(self._slots)

    @property
    def labels(self) -> List[str]:
        return [slot.label for slot in self._slots]

    @property
    def occupied_count(self) -> int:
        return sum(1 for slot in self._slots if slot.is_occupied)

    @property
    def free_count(self) -> int:
        return self.total_slots - self.occupied_count

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def find_slot(self, label: str) -> Optional[Slot]:
        return self._by_label.get(label)

    def park(self, vehicle: Vehicle, label: str) -> Slot:
        slot = self.find_slot(label)
        if slot is None:
            raise SlotNotFound(label)
        if slot.is_occupied:
            raise SlotOccupied(label)

        slot.occupant = vehicle
        return slot

    def release(self, label: str) -> Vehicle:
        slot = self.find_slot(label)
        if slot is None or not slot.is_occupied:
            raise SlotNotFoundOrEmpty(label)

        vehicle = slot.occupant
        slot.occupant = None
        return vehicle

    def restore(self, persisted: Iterable[Slot]) -> int:
        """Apply persisted slot states, returning how many slots were restored.

        Labels this lot does not have are ignored, slots absent from
        ``persisted`` keep their current state.
        """
        restored = 0
        for record in persisted:
            slot = self.find_slot(record.label)
            if slot is None:
                logger.debug(f"Ignoring persisted state for unknown slot {record.label}")
                continue
            slot.occupant = record.occupant
            restored += 1
        return restored
