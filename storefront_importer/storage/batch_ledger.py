"""
Batch Ledger

Two-checkpoint audit record of an import run: a row is created in
"processing" when publishing starts and written once more at the end.
There are no intermediate progress writes, so a run that dies mid-way
stays "processing".
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from ..models import ImportBatch
from .database import Database

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class BatchLedger:
    """
    Records import batches.

    Usage:
        ledger = BatchLedger(db)
        batch_id = ledger.start_batch(shop, len(products), urls, settings.to_dict())
        ...
        ledger.complete_batch(batch_id, imported, failed)
    """

    def __init__(self, db: Database):
        self.db = db

    def start_batch(
        self,
        shop: str,
        total_products: int,
        source_urls: Sequence[str],
        settings_snapshot: Dict[str, Any],
    ) -> int:
        """Create a batch in processing state; returns its id."""
        cursor = self.db.execute(
            "INSERT INTO import_batches (shop, status, total_products, source_urls, settings_snapshot, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                shop,
                STATUS_PROCESSING,
                total_products,
                json.dumps(list(source_urls or [])),
                json.dumps(settings_snapshot, ensure_ascii=False),
                int(time.time()),
            ),
        )
        logger.info("Started batch %d for %s (%d products)", cursor.lastrowid, shop, total_products)
        return cursor.lastrowid

    def _finish(self, batch_id: int, status: str, imported: int, failed: int) -> None:
        self.db.execute(
            "UPDATE import_batches SET status = ?, imported_products = ?, failed_products = ?, "
            "completed_at = ? WHERE id = ?",
            (status, imported, failed, int(time.time()), batch_id),
        )

    def complete_batch(self, batch_id: int, imported: int, failed: int) -> None:
        self._finish(batch_id, STATUS_COMPLETED, imported, failed)
        logger.info("Batch %d completed: %d imported, %d failed", batch_id, imported, failed)

    def fail_batch(self, batch_id: int, imported: int = 0, failed: int = 0) -> None:
        """Mark a batch whose run aborted as a whole."""
        self._finish(batch_id, STATUS_FAILED, imported, failed)
        logger.error("Batch %d failed", batch_id)

    @staticmethod
    def _to_batch(row) -> ImportBatch:
        data = dict(row)
        data["source_urls"] = json.loads(data.get("source_urls") or "[]")
        data["settings_snapshot"] = json.loads(data.get("settings_snapshot") or "{}")
        return ImportBatch(**data)

    def get_batch(self, batch_id: int, shop: str) -> Optional[ImportBatch]:
        row = self.db.query_one(
            "SELECT * FROM import_batches WHERE id = ? AND shop = ?", (batch_id, shop)
        )
        return self._to_batch(row) if row else None

    def list_batches(self, shop: str, limit: int = 50) -> List[ImportBatch]:
        rows = self.db.query_all(
            "SELECT * FROM import_batches WHERE shop = ? ORDER BY created_at DESC, id DESC LIMIT ?",
            (shop, limit),
        )
        return [self._to_batch(row) for row in rows]
