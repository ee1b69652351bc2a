"""Composition root: build everything once at process start and hand the service to whatever serves the requests."""

import logging
from typing import Optional

from src.core.config import Settings, configure_logging, get_settings
from src.db.database import create_db_engine, create_session_factory, init_db
from src.db.sql_repository import SQLSessionRepository
from src.services.session_service import SessionService

logger = logging.getLogger(__name__)


def build_service(settings: Optional[Settings] = None) -> SessionService:
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_db_engine(settings)
    init_db(engine)
    repository = SQLSessionRepository(
        create_session_factory(engine),
        max_retries=settings.max_transaction_retries,
    )
    logger.info("Session store ready at %s", engine.url.render_as_string(hide_password=True))
    return SessionService(repository, settings)
