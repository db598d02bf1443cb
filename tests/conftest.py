import pytest
from decimal import Decimal

from lotkeeper.application.services.earnings_service import EarningsService
from lotkeeper.application.services.parking_service import ParkingService
from lotkeeper.config.settings_env import Settings
from lotkeeper.domain.ledger import LedgerEngine
from lotkeeper.domain.slot_registry import SlotRegistry
from lotkeeper.infrastructure.persistence.database import create_engine, init_db
from lotkeeper.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemySlotRepository,
    SQLAlchemyEarningsRepository,
)
from lotkeeper.infrastructure.persistence.text_repositories import (
    TextFileSlotRepository,
    TextFileEarningsRepository,
)


@pytest.fixture
def test_settings(tmp_path):
    """Provide test settings pointing at a temporary data directory."""
    return Settings(
        DEV_MODE=False,
        TOTAL_SLOTS=3,
        HOURLY_RATE=Decimal("50"),
        STORAGE_BACKEND="text",
        DATA_DIR=str(tmp_path),
        DATABASE_URL=f"sqlite:///{tmp_path / 'lot.db'}",
    )


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path


@pytest.fixture
def slot_repo(data_dir):
    return TextFileSlotRepository(data_dir)


@pytest.fixture
def earnings_repo(data_dir):
    return TextFileEarningsRepository(data_dir)


@pytest.fixture
def session_factory(tmp_path):
    """A file-backed SQLite database, one per test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test_lot.db'}")
    factory = init_db(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def sql_slot_repo(session_factory):
    return SQLAlchemySlotRepository(session_factory)


@pytest.fixture
def sql_earnings_repo(session_factory):
    return SQLAlchemyEarningsRepository(session_factory)


@pytest.fixture
def registry():
    return SlotRegistry(3)


@pytest.fixture
def ledger_engine():
    return LedgerEngine(hourly_rate=Decimal("50"))


@pytest.fixture
def parking_service(registry, ledger_engine, slot_repo, earnings_repo):
    """Create a ParkingService over a 3-slot lot stored in text files."""
    return ParkingService(
        registry=registry,
        ledger_engine=ledger_engine,
        slot_repo=slot_repo,
        earnings_repo=earnings_repo,
    )


@pytest.fixture
def earnings_service(ledger_engine):
    return EarningsService(ledger_engine)


@pytest.fixture
def parked_vehicle(parking_service):
    """Park XYZ123 in slot A2."""
    return parking_service.park_vehicle("XYZ123", "A2")
