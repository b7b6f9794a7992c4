"""Session helpers for services and routes that write."""
import logging
from contextlib import contextmanager

from models import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(message="Database write failed"):
    """Commit what the block staged; on any error log, roll back and re-raise."""
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        logger.error("%s: %s", message, e, exc_info=True)
        db.session.rollback()
        raise


def reset_session(reason) -> None:
    """Roll back after a failed read so the request can keep using the session."""
    logger.warning("Rolling back session: %s", reason)
    db.session.rollback()
