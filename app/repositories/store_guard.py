"""
Degraded-mode policy for repository functions.

Every repository function takes the session as its first argument; db is None
when the store is not configured.
- read_path: unavailable store -> log + empty result, so the UI can render an empty state.
- write_path: unavailable store -> StoreUnavailable (caller cannot proceed without the row),
  or a logged no-op with missing_ok=True. Failed writes are rolled back before re-raising.
"""
import logging
from functools import wraps

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


def read_path(default_factory):
    def decorator(func):
        @wraps(func)
        def wrapper(db, *args, **kwargs):
            if db is None:
                logger.warning("[Database] Cannot %s: database not available", func.__name__)
                return default_factory()
            try:
                return func(db, *args, **kwargs)
            except OperationalError as e:
                logger.warning("[Database] %s failed, returning empty result: %s", func.__name__, e)
                db.rollback()
                return default_factory()
        return wrapper
    return decorator


def write_path(missing_ok: bool = False):
    def decorator(func):
        @wraps(func)
        def wrapper(db, *args, **kwargs):
            if db is None:
                if missing_ok:
                    logger.warning("[Database] Cannot %s: database not available", func.__name__)
                    return None
                raise StoreUnavailable()
            try:
                return func(db, *args, **kwargs)
            except OperationalError as e:
                db.rollback()
                logger.exception("[Database] %s failed: store unreachable", func.__name__)
                raise StoreUnavailable() from e
            except SQLAlchemyError:
                db.rollback()
                logger.exception("[Database] %s failed", func.__name__)
                raise
        return wrapper
    return decorator
