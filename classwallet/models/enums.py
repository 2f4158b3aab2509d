"""
Shared enumerations for database models.

Python enums mapped to database enums ensure that only valid
values can be stored. An invalid transaction type is caught at
the database level, not just in Python validation.
"""

import enum


class TransactionType(str, enum.Enum):
    """What kind of wallet event a transaction records."""
    REWARD = "REWARD"
    FINE = "FINE"
    PURCHASE = "PURCHASE"
    ADJUSTMENT = "ADJUSTMENT"


class SyncStatus(str, enum.Enum):
    """Whether a transaction has been pushed to the admin server."""
    PENDING = "pending"
    SYNCED = "synced"
