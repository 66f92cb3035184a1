"""
Diagnostic log sink backed by the app_logs table.
"""
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifedesk.core.logging import get_logger
from lifedesk.db.models import AppLogModel

logger = get_logger("db.crud_logs")


class AppLogSink:
    """Records diagnostic events. Never raises: a failed write is only logged."""

    def __init__(self, db: Session):
        self.db = db

    def log_error(self, message: str, details: Optional[Dict[str, Any]] = None, user_id: Optional[str] = None) -> None:
        try:
            self.db.add(AppLogModel(level="error", message=message, details=details, user_id=user_id))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write app log '{message}': {e}")
