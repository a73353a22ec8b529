import logging

from assessment_hub.core.config import Config
from assessment_hub.storage.base import DEFAULT_DEPARTMENTS, Storage
from assessment_hub.storage.memory import MemStorage

logger = logging.getLogger(__name__)


def build_storage(config: Config) -> Storage:
    """Construct the record store selected by ``STORAGE_BACKEND``."""
    backend = config.storage_backend.lower()
    if backend == "memory":
        return MemStorage()
    if backend == "sql":
        # Imported lazily so the in-memory backend does not touch the database layer
        from assessment_hub.database import create_db_engine, create_session_factory, init_db
        from assessment_hub.storage.sql import SqlStorage

        engine = create_db_engine(config.database_url)
        init_db(engine)
        logger.info(f"Using SQL storage at {engine.url.render_as_string(hide_password=True)}")
        return SqlStorage(create_session_factory(engine))
    raise ValueError(f"Unknown STORAGE_BACKEND '{config.storage_backend}' (expected 'memory' or 'sql')")


__all__ = ["Storage", "MemStorage", "build_storage", "DEFAULT_DEPARTMENTS"]
