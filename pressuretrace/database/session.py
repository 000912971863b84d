import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pressuretrace.core.config import settings
from pressuretrace.models.base import Base

# Register tables on Base.metadata.
from pressuretrace.models import alert, frame  # noqa: F401

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def init_db() -> None:
    # Create tables. Frames and alerts are append-only, so no migrations are run here.
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
