"""Domain layer for cashpilot application."""

from cashpilot.domain.ledger_service import LedgerService
from cashpilot.domain.backup import BackupService
from cashpilot.domain.advice import AdviceService

__all__ = [
    "LedgerService",
    "BackupService",
    "AdviceService",
]
