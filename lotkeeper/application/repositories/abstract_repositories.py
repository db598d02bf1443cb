from abc import ABC, abstractmethod
from typing import Iterable, List

from lotkeeper.domain.entities import Slot, LotLedger


class AbstractSlotRepository(ABC):
    @abstractmethod
    def load(self) -> List[Slot]:
        """Return the persisted slots, skipping records that cannot be parsed."""

    @abstractmethod
    def save(self, slots: Iterable[Slot]) -> None:
        pass


class AbstractEarningsRepository(ABC):
    @abstractmethod
    def load(self) -> LotLedger:
        """Return the persisted earnings, zero for any accumulator never saved."""

    @abstractmethod
    def save(self, ledger: LotLedger) -> None:
        pass
