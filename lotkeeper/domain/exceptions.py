class ParkingError(ValueError):
    """Base class for every failure reported by the parking lot."""


class SlotNotFound(ParkingError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Invalid slot: {label}")


class SlotOccupied(ParkingError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Slot {label} is already occupied.")


class SlotNotFoundOrEmpty(ParkingError):
    """Exit from a slot that is unknown or already free.

    Both cases are reported the same way, callers cannot tell them apart.
    """

    def __init__(self, label: str):
        self.label = label
        super().__init__("Slot is empty or invalid slot number.")


class MalformedPersistedRecord(ParkingError):
    def __init__(self, source: str, line_number: int | None, reason: str):
        self.source = source
        self.line_number = line_number
        self.reason = reason
        location = f"{source}:{line_number}" if line_number is not None else source
        super().__init__(f"Malformed record in {location}: {reason}")


class PersistenceFailure(ParkingError):
    """A store could not be read or written.

    When raised after a park or exit, the in-memory change has already been
    applied and ``result`` carries the snapshot of that operation.
    """

    def __init__(self, message: str, result=None):
        self.result = result
        super().__init__(message)
