from .sqlalchemy_repositories import (
    SQLAlchemySlotRepository,
    SQLAlchemyEarningsRepository,
)

__all__ = [
    "SQLAlchemySlotRepository",
    "SQLAlchemyEarningsRepository",
]
