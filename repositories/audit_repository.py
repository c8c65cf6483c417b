"""Repository for the append-only audit trail."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from models.notification import AuditLog

logger = logging.getLogger(__name__)


class AuditRepository:
    """Writes audit rows; rows are never updated or deleted."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        action: str,
        table_name: str,
        record_id: int,
        user_id: int | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Append one audit entry.

        Args:
            action: CREATE, UPDATE or DELETE.
            table_name: Table the change applies to.
            record_id: Primary key of the changed row.
            user_id: Employee who made the change.
            old_values: Snapshot before the change.
            new_values: Snapshot after the change.

        Returns:
            The created AuditLog record.
        """
        entry = AuditLog(
            user_id=user_id,
            action=action,
            table_name=table_name,
            record_id=record_id,
            old_values=old_values,
            new_values=new_values,
        )
        self.db.add(entry)
        self.db.flush()
        logger.info(
            "Audit %s on %s id=%s by user_id=%s",
            action,
            table_name,
            record_id,
            user_id,
        )
        return entry

    def for_record(self, table_name: str, record_id: int) -> list[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(AuditLog.table_name == table_name)
            .filter(AuditLog.record_id == record_id)
            .order_by(AuditLog.id)
            .all()
        )
