"""Transaction helper for multi-record writes that must never be left half-applied"""

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from .. import config
from ..errors import DomainError, InternalInconsistency

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_transaction(db: Session, operation: Callable[[], T], description: str) -> T:
    """
    Run ``operation`` and commit, retrying on write conflicts.

    Domain errors roll back and propagate at once. Integrity and operational
    errors (duplicate keys from a concurrent writer, deadlocks, serialization
    failures) roll back and retry, so the next attempt re-reads fresh state.
    Once MATCH_TX_MAX_RETRIES attempts are spent, InternalInconsistency is raised.
    """
    attempts = max(1, config.MATCH_TX_MAX_RETRIES)
    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except DomainError:
            db.rollback()
            raise
        except (IntegrityError, OperationalError) as e:
            db.rollback()
            logger.warning(f"⚠️ {description} conflicted (attempt {attempt}/{attempts}): {e}")

    logger.error(f"❌ {description} failed after {attempts} attempts, nothing was applied")
    raise InternalInconsistency()
