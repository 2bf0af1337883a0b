"""Backup export and import.

Exports write the whole ledger as a JSON document, or the transactions as
CSV. Importing a JSON backup replaces the stored ledger wholesale; a document
that is not a ledger is rejected before anything is written.
"""

import csv
import io
import json
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from cashpilot.database.mappers import state_from_document, state_to_document
from cashpilot.domain.entities import LedgerState
from cashpilot.domain.errors import ImportFormatError
from cashpilot.logging_setup import get_logger

if TYPE_CHECKING:
    from cashpilot.database.base import LedgerStore

logger = get_logger("cashpilot.domain.backup")

CSV_HEADERS = [
    "ID",
    "Date",
    "Type",
    "Category",
    "Amount",
    "Currency",
    "Account",
    "Notes",
    "Related Loan ID",
]

# Fields a backup must carry as lists to be accepted
REQUIRED_LIST_FIELDS = ("transactions", "accounts")


def export_json(state: LedgerState) -> str:
    """Serialize the whole ledger as a JSON document."""
    return json.dumps(state_to_document(state), indent=2)


def export_csv(state: LedgerState) -> str:
    """Serialize the transactions as CSV, one row per transaction.

    Currency and account name come from the referenced account; a transaction
    whose account is gone is reported under the default currency as
    "Unknown Account".
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for txn in state.transactions:
        account = state.get_account(txn.account_id)
        writer.writerow(
            [
                txn.id,
                txn.date.isoformat(),
                txn.type.value,
                txn.category,
                str(txn.amount),
                account.currency if account else state.settings.currency,
                account.name if account else "Unknown Account",
                txn.notes or "",
                txn.related_loan_id or "",
            ]
        )
    return buffer.getvalue()


def parse_backup(text: str) -> LedgerState:
    """Parse a JSON backup into a ledger.

    Args:
        text: Backup file contents

    Returns:
        Ledger merged field by field with the defaults

    Raises:
        ImportFormatError: If the text is not JSON or lacks the transaction
            and account lists
    """
    try:
        document: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ImportFormatError("Invalid backup file format: expected a JSON object")
    missing = [f for f in REQUIRED_LIST_FIELDS if not isinstance(document.get(f), list)]
    if missing:
        raise ImportFormatError(
            f"Invalid backup file format: missing or non-list field(s): {', '.join(missing)}"
        )
    return state_from_document(document)


def default_export_name(kind: str, today: Optional[date] = None) -> str:
    """File name for an export, e.g. ``cashpilot_backup_2024-01-15.json``."""
    today = today or date.today()
    if kind == "csv":
        return f"cashpilot_transactions_{today.isoformat()}.csv"
    return f"cashpilot_backup_{today.isoformat()}.json"


class BackupService:
    """Service for exporting and importing ledger backups."""

    def __init__(self, store: "LedgerStore"):
        """Initialize backup service.

        Args:
            store: Store whose ledger snapshot is replaced on import
        """
        self.store = store

    def export_file(self, state: LedgerState, path: str, kind: str = "json") -> Path:
        """Write a JSON or CSV export to ``path``."""
        content = export_csv(state) if kind == "csv" else export_json(state)
        target = Path(path)
        target.write_text(content, encoding="utf-8")
        return target

    def import_file(self, path: str) -> LedgerState:
        """Replace the stored ledger with the contents of a JSON backup.

        Raises:
            ImportFormatError: If the file is not a valid backup
            FileNotFoundError: If the file does not exist
            StorageError: If the new ledger could not be written
        """
        source = Path(path)
        if not source.exists():
            raise FileNotFoundError(f"Backup file not found: {path}")
        state = parse_backup(source.read_text(encoding="utf-8-sig"))
        self.store.save(state)
        logger.info(
            "Imported backup with %d transactions, %d loans, %d accounts",
            len(state.transactions),
            len(state.loans),
            len(state.accounts),
        )
        return state
