"""Console entry point for the parking lot."""
import argparse
import sys
from decimal import Decimal, InvalidOperation
from typing import Callable

from lotkeeper.application.services.earnings_service import EarningsService
from lotkeeper.application.services.parking_service import ParkingService
from lotkeeper.config.settings_env import Settings, settings as default_settings
from lotkeeper.domain.exceptions import PersistenceFailure
from lotkeeper.domain.ledger import LedgerEngine
from lotkeeper.domain.slot_registry import SlotRegistry
from lotkeeper.infrastructure.cli.menu import ParkingMenu
from lotkeeper.infrastructure.persistence.repository_factory import build_repositories
from lotkeeper.shared.utils import initialize_logger, logger


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} is not a positive integer")
    return number


def non_negative_decimal(value: str) -> Decimal:
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not number.is_finite() or number < 0:
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid hourly rate")
    return number


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lotkeeper", description="Parking lot check-in, check-out and earnings.")
    parser.add_argument("--slots", type=positive_int, help="number of parking slots")
    parser.add_argument("--backend", choices=["text", "sqlite"], help="where lot state is stored")
    parser.add_argument("--data-dir", help="directory of the text data files")
    parser.add_argument("--database-url", help="database URL for the sqlite backend")
    parser.add_argument("--rate", type=non_negative_decimal, help="hourly parking rate")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "TOTAL_SLOTS": args.slots,
        "STORAGE_BACKEND": args.backend,
        "DATA_DIR": args.data_dir,
        "DATABASE_URL": args.database_url,
        "HOURLY_RATE": args.rate,
    }
    return settings.model_copy(update={key: value for key, value in overrides.items() if value is not None})


def prompt_total_slots(input_func: Callable[[str], str] = input, output: Callable[[str], None] = print) -> int:
    while True:
        answer = input_func("Enter the number of parking slots: ").strip()
        try:
            return positive_int(answer)
        except argparse.ArgumentTypeError as e:
            output(f"Invalid number of slots: {e}")


def build_services(settings: Settings, total_slots: int):
    slot_repo, earnings_repo = build_repositories(settings)
    ledger_engine = LedgerEngine(hourly_rate=settings.HOURLY_RATE)
    parking_service = ParkingService(
        registry=SlotRegistry(total_slots),
        ledger_engine=ledger_engine,
        slot_repo=slot_repo,
        earnings_repo=earnings_repo,
        currency_symbol=settings.CURRENCY_SYMBOL,
    )
    earnings_service = EarningsService(ledger_engine, currency_symbol=settings.CURRENCY_SYMBOL)
    return parking_service, earnings_service


def main(argv=None, input_func: Callable[[str], str] = input, output: Callable[[str], None] = print) -> int:
    args = parse_args(argv)
    settings: Settings = apply_overrides(default_settings, args)
    initialize_logger(settings.DEV_MODE)

    try:
        total_slots = settings.TOTAL_SLOTS or prompt_total_slots(input_func, output)
    except EOFError:
        return 0

    try:
        parking_service, earnings_service = build_services(settings, total_slots)
        parking_service.load_state()
    except PersistenceFailure as e:
        logger.error(f"Could not load parking lot state: {e}")
        output(f"Could not load parking lot state: {e}")
        return 1

    menu = ParkingMenu(parking_service, earnings_service, settings.SLOTS_PER_ROW, input_func, output)
    menu.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
