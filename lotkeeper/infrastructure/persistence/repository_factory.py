from typing import Tuple

from lotkeeper.application.repositories import AbstractSlotRepository, AbstractEarningsRepository
from lotkeeper.config.settings_env import Settings
from lotkeeper.infrastructure.persistence.database import create_engine, init_db
from lotkeeper.infrastructure.persistence.sqlalchemy_repositories import (
    SQLAlchemySlotRepository,
    SQLAlchemyEarningsRepository,
)
from lotkeeper.infrastructure.persistence.text_repositories import (
    TextFileSlotRepository,
    TextFileEarningsRepository,
)


def build_repositories(settings: Settings) -> Tuple[AbstractSlotRepository, AbstractEarningsRepository]:
    if settings.STORAGE_BACKEND == "sqlite":
        session_factory = init_db(create_engine(settings.DATABASE_URL))
        return SQLAlchemySlotRepository(session_factory), SQLAlchemyEarningsRepository(session_factory)
    return TextFileSlotRepository(settings.DATA_DIR), TextFileEarningsRepository(settings.DATA_DIR)
