from loguru import logger
from sqlalchemy import create_engine as sqlalchemy_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from lotkeeper.domain.exceptions import PersistenceFailure
from lotkeeper.infrastructure.persistence.models.models import Base


def create_engine(database_url: str) -> Engine:
    return sqlalchemy_create_engine(
        database_url,
        connect_args={"check_same_thread": False} if "sqlite" in database_url else {},
    )


def init_db(engine: Engine) -> sessionmaker:
    logger.debug(f"Initializing database at: {engine.url}")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"Could not initialize database {engine.url}: {e}") from e
    return sessionmaker(bind=engine, expire_on_commit=False)
