"""
Database utilities shared by the repository adapters.
"""

import contextlib
import logging
from typing import Generator

from django.db import DatabaseError, IntegrityError

from core.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def storage_errors(operation: str) -> Generator[None, None, None]:
    """
    Translate driver failures into StorageError.

    IntegrityError passes through untouched so repositories can map
    constraint violations to conflicts.

    Usage:
        with storage_errors("acquire license key"):
            # ORM calls
            pass
    """
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as e:
        logger.error("Storage failure during %s: %s", operation, e, exc_info=True)
        raise StorageError(f"Storage failure during {operation}.") from e
