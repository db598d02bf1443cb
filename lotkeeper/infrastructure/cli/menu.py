from typing import Callable

from loguru import logger

from lotkeeper.application.services.earnings_service import EarningsService
from lotkeeper.application.services.parking_service import ParkingService
from lotkeeper.domain.common import EarningsPeriod
from lotkeeper.domain.exceptions import ParkingError, PersistenceFailure
from lotkeeper.infrastructure.cli.rendering import (
    render_park_result,
    render_exit_result,
    render_lot_map,
    render_earnings,
)

MENU = """
1. Park Vehicle
2. Exit Vehicle
3. Display Parking Lot Map
4. Display Total Earnings
5. Display Weekly Earnings
6. Display Monthly Earnings
0. Exit"""


class ParkingMenu:
    def __init__(
        self,
        parking_service: ParkingService,
        earnings_service: EarningsService,
        slots_per_row: int = 10,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.parking_service = parking_service
        self.earnings_service = earnings_service
        self.slots_per_row = slots_per_row
        self.input = input_func
        self.output = output
        self.actions = {
            "1": self.park,
            "2": self.exit,
            "3": self.show_map,
            "4": lambda: self.show_earnings(EarningsPeriod.TOTAL),
            "5": lambda: self.show_earnings(EarningsPeriod.WEEKLY),
            "6": lambda: self.show_earnings(EarningsPeriod.MONTHLY),
        }

    def run(self):
        self.output("Welcome to the Parking Lot System!")
        while True:
            self.output(MENU)
            try:
                option = self.input("\nChoose an option: ").strip()
            except EOFError:
                option = "0"

            if option == "0":
                self.output("Exiting the system...")
                return

            action = self.actions.get(option)
            if action is None:
                logger.debug(f"Unknown menu option {option!r}")
                self.output("Invalid option! Please try again.")
                continue

            try:
                action()
            except EOFError:
                self.output("Exiting the system...")
                return

    def park(self):
        license_plate = self.input("Enter vehicle license plate: ").strip()
        slot_label = self.input("Enter parking slot label (e.g., A1, B2, etc.): ").strip()
        try:
            result = self.parking_service.park_vehicle(license_plate, slot_label)
        except PersistenceFailure as e:
            self._report_unsaved(e, render_park_result)
            return
        except ParkingError as e:
            self.output(str(e))
            return
        self.output(render_park_result(result))

    def exit(self):
        slot_label = self.input("Enter parking slot label to exit vehicle: ").strip()
        try:
            result = self.parking_service.exit_vehicle(slot_label)
        except PersistenceFailure as e:
            self._report_unsaved(e, render_exit_result)
            return
        except ParkingError as e:
            self.output(str(e))
            return
        self.output(render_exit_result(result))

    def show_map(self):
        self.output(render_lot_map(self.parking_service.get_lot_map(), self.slots_per_row))

    def show_earnings(self, period: EarningsPeriod):
        self.output(render_earnings(self.earnings_service.get_snapshot(), period))

    def _report_unsaved(self, failure: PersistenceFailure, render):
        if failure.result is not None:
            self.output(render(failure.result))
        self.output(f"Warning: the change was applied but could not be saved ({failure})")
