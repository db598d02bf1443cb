from .abstract_repositories import (
    AbstractSlotRepository,
    AbstractEarningsRepository,
)

__all__ = [
    "AbstractSlotRepository",
    "AbstractEarningsRepository",
]
