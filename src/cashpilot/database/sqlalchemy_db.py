"""Generic SQLAlchemy store implementation."""

import hashlib
import hmac
import json
import secrets
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cashpilot.database.base import LedgerStore
from cashpilot.database.mappers import state_from_document, state_to_document
from cashpilot.database.models import (
    CREDENTIAL_KEY,
    STATE_KEY,
    StoreEntry,
    create_session_factory,
)
from cashpilot.domain.entities import LedgerState, default_state
from cashpilot.domain.errors import StorageError
from cashpilot.logging_setup import get_logger

logger = get_logger("cashpilot.database.sqlalchemy_db")

_HASH_SCHEME = "pbkdf2_sha256"
_HASH_ITERATIONS = 200_000


def hash_secret(secret: str, salt: Optional[bytes] = None, iterations: int = _HASH_ITERATIONS) -> str:
    """Return a salted PBKDF2 hash string for a PIN."""
    salt = salt if salt is not None else secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", secret.encode("utf-8"), salt, iterations)
    return f"{_HASH_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def check_secret(secret: str, stored: str) -> bool:
    """Compare a PIN with a stored hash string in constant time.

    Values without the hash prefix are PINs stored in plain text by older
    versions and are compared directly.
    """
    parts = stored.split("$")
    if len(parts) != 4 or parts[0] != _HASH_SCHEME:
        return hmac.compare_digest(secret.encode("utf-8"), stored.encode("utf-8"))
    _, iterations, salt_hex, _ = parts
    try:
        expected = hash_secret(secret, bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(expected, stored)


class SQLAlchemyStore(LedgerStore):
    """SQLAlchemy-based implementation of the LedgerStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot open database {database_url}: {e}") from e
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize the storage schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def _get_value(self, key: str) -> Optional[str]:
        session = self._get_session()
        try:
            entry = session.get(StoreEntry, key)
            return None if entry is None else entry.value
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to read '{key}': {e}") from e

    def _put_value(self, key: str, value: str) -> None:
        session = self._get_session()
        try:
            entry = session.get(StoreEntry, key)
            if entry is None:
                session.add(StoreEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def _delete_value(self, key: str) -> None:
        session = self._get_session()
        try:
            entry = session.get(StoreEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to delete '{key}': {e}") from e

    # Ledger snapshot
    def load(self) -> LedgerState:
        """Load the persisted ledger, merging it with defaults."""
        raw = self._get_value(STATE_KEY)
        if raw is None:
            return default_state()
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored ledger is not valid JSON, using defaults: %s", e)
            return default_state()
        return state_from_document(document)

    def save(self, state: LedgerState) -> None:
        """Persist the whole ledger under the root key."""
        self._put_value(STATE_KEY, json.dumps(state_to_document(state)))

    # Credential
    def has_credential(self) -> bool:
        """Whether a PIN has been set."""
        return bool(self._get_value(CREDENTIAL_KEY))

    def verify_credential(self, secret: str) -> bool:
        """Check a PIN against the stored hash."""
        stored = self._get_value(CREDENTIAL_KEY)
        if not stored:
            return False
        return check_secret(secret, stored)

    def set_credential(self, secret: str) -> None:
        """Store the hash of a new PIN."""
        self._put_value(CREDENTIAL_KEY, hash_secret(secret))

    def remove_credential(self) -> None:
        """Remove the stored PIN."""
        self._delete_value(CREDENTIAL_KEY)
