from .text_repositories import (
    TextFileSlotRepository,
    TextFileEarningsRepository,
)

__all__ = [
    "TextFileSlotRepository",
    "TextFileEarningsRepository",
]
