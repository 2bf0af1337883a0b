"""Abstract storage interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from cashpilot.domain.entities import LedgerState


class LedgerStore(ABC):
    """Abstract key-value store holding one ledger snapshot and one credential."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize the storage schema (create tables)."""
        pass

    # Ledger snapshot
    @abstractmethod
    def load(self) -> LedgerState:
        """Load the persisted ledger.

        A missing snapshot yields the default ledger; malformed fields fall
        back to their defaults one by one. Never raises for bad data.
        """
        pass

    @abstractmethod
    def save(self, state: LedgerState) -> None:
        """Persist the whole ledger, replacing any previous snapshot."""
        pass

    # Credential
    @abstractmethod
    def has_credential(self) -> bool:
        """Whether a PIN has been set."""
        pass

    @abstractmethod
    def verify_credential(self, secret: str) -> bool:
        """Check a PIN against the stored one."""
        pass

    @abstractmethod
    def set_credential(self, secret: str) -> None:
        """Store a new PIN, replacing any existing one."""
        pass

    @abstractmethod
    def remove_credential(self) -> None:
        """Remove the stored PIN."""
        pass
