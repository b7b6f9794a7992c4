import logging
from celery import shared_task
from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from app.services.commission import recalculate_all_commissions

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def recalculate_commissions_task(self, limit=None) -> int:
    """Recompute and store admin commission on completed orders."""
    from app import create_app
    app = current_app._get_current_object() if has_app_context() else create_app()
    with app.app_context():
        try:
            updated = recalculate_all_commissions(limit=limit)
        except SQLAlchemyError as exc:
            logger.error("Commission recalculation failed: %s", exc)
            raise self.retry(exc=exc)
    return updated
