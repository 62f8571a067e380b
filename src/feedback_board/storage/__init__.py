"""Local persistence for the per-device vote ledger."""

from .ledger_storage import InMemoryLedgerStorage, JsonFileLedgerStorage, LedgerStorage
from .vote_ledger import VoteLedger

__all__ = ["InMemoryLedgerStorage", "JsonFileLedgerStorage", "LedgerStorage", "VoteLedger"]
