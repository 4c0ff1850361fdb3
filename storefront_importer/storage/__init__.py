"""
Persistence (SQLite).

Modules:
    database      - Connection wrapper and migrations
    stores        - Settings, prompt template and negative word stores
    batch_ledger  - Import batch audit records
"""

from .batch_ledger import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_PROCESSING,
    BatchLedger,
)
from .database import Database
from .stores import NegativeWordStore, SettingsStore, TemplateStore

__all__ = [
    'Database',
    'SettingsStore',
    'TemplateStore',
    'NegativeWordStore',
    'BatchLedger',
    'STATUS_PENDING',
    'STATUS_PROCESSING',
    'STATUS_COMPLETED',
    'STATUS_FAILED',
]
