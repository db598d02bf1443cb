from decimal import Decimal
from typing import Iterable, List

from loguru import logger
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from lotkeeper.application.repositories import AbstractSlotRepository, AbstractEarningsRepository
from lotkeeper.domain.common import EarningsPeriod, ZERO
from lotkeeper.domain.entities import Slot, Vehicle, LotLedger
from lotkeeper.domain.exceptions import MalformedPersistedRecord, PersistenceFailure
from lotkeeper.infrastructure.persistence.models.models import SlotRecord, EarningsRecord
from lotkeeper.infrastructure.persistence.text_repositories.text_repositories import parse_amount
from lotkeeper.shared.formatting import format_amount


def _to_slot(record: SlotRecord) -> Slot:
    if not record.is_occupied:
        return Slot(record.label)
    if record.license_plate is None or record.entry_time is None:
        raise MalformedPersistedRecord(SlotRecord.__tablename__, record.position, "occupied slot without a vehicle")
    return Slot(record.label, occupant=Vehicle(license_plate=record.license_plate, entry_time=record.entry_time))


class SQLAlchemySlotRepository(AbstractSlotRepository):
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load(self) -> List[Slot]:
        slots = []
        try:
            with self.session_factory() as session:
                records = session.execute(select(SlotRecord).order_by(SlotRecord.position)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not read slot state: {e}") from e

        for record in records:
            try:
                slots.append(_to_slot(record))
            except MalformedPersistedRecord as e:
                logger.warning(f"Skipping record: {e}")
        return slots

    def save(self, slots: Iterable[Slot]) -> None:
        try:
            with self.session_factory() as session, session.begin():
                session.execute(delete(SlotRecord))
                for position, slot in enumerate(slots):
                    session.add(SlotRecord(
                        label=slot.label,
                        position=position,
                        is_occupied=slot.is_occupied,
                        license_plate=slot.occupant.license_plate if slot.is_occupied else None,
                        entry_time=slot.occupant.entry_time if slot.is_occupied else None,
                    ))
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not write slot state: {e}") from e


class SQLAlchemyEarningsRepository(AbstractEarningsRepository):
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load(self) -> LotLedger:
        try:
            with self.session_factory() as session:
                records = session.execute(select(EarningsRecord)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not read earnings: {e}") from e

        amounts = {period: ZERO for period in EarningsPeriod}
        for record in records:
            try:
                period = EarningsPeriod(record.name)
                amounts[period] = parse_amount(record.amount, EarningsRecord.__tablename__)
            except ValueError as e:
                # MalformedPersistedRecord is a ValueError too
                logger.warning(f"Skipping earnings row {record.name!r}: {e}")

        return LotLedger(
            total_earnings=amounts[EarningsPeriod.TOTAL],
            weekly_earnings=amounts[EarningsPeriod.WEEKLY],
            monthly_earnings=amounts[EarningsPeriod.MONTHLY],
        )

    def save(self, ledger: LotLedger) -> None:
        amounts: dict[EarningsPeriod, Decimal] = {
            EarningsPeriod.TOTAL: ledger.total_earnings,
            EarningsPeriod.WEEKLY: ledger.weekly_earnings,
            EarningsPeriod.MONTHLY: ledger.monthly_earnings,
        }
        try:
            with self.session_factory() as session, session.begin():
                for period, amount in amounts.items():
                    session.merge(EarningsRecord(name=period.value, amount=format_amount(amount)))
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not write earnings: {e}") from e
