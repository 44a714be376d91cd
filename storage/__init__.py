from core.config import Settings
from core.logging import get_logger
from storage.base import Storage
from storage.errors import IntegrityViolation, StorageError

logger = get_logger(__name__)

__all__ = ["Storage", "StorageError", "IntegrityViolation", "build_storage"]


def build_storage(settings: Settings) -> Storage:
    """Construct the process-wide storage for the configured backend."""
    if settings.STORAGE_BACKEND == "memory":
        from storage.memory import MemoryStorage

        logger.info("Using in-memory storage")
        return MemoryStorage()
    if settings.STORAGE_BACKEND == "database":
        from core.db import Base, SessionLocal, engine
        from storage.database import DatabaseStorage
        import models  # noqa: F401

        # Ensure tables exist (for dev/test; in prod use migrations)
        Base.metadata.create_all(bind=engine)
        logger.info("Using database storage at %s", engine.url.render_as_string(hide_password=True))
        return DatabaseStorage(SessionLocal)
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
