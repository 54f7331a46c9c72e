"""
DataStore — the collaborator contract for the decision pipeline.

Reads are read-only from the pipeline's point of view. append_ledger must be
an atomic insert that rejects a duplicate ledger_id.
"""

from abc import ABC, abstractmethod
from typing import Optional

from launchsense.decisions.schemas import LedgerEntry, RuleDefinition
from launchsense.schemas.telemetry import HistoryRecord


class DataStore(ABC):

    @abstractmethod
    async def fetch_active_rules(self) -> list[RuleDefinition]:
        """Active rules ordered by ascending priority (stable on ties)."""

    @abstractmethod
    async def fetch_signal_weights(self) -> dict[str, float]:
        """Signal key → confidence weight. Missing keys weigh 1."""

    @abstractmethod
    async def fetch_history(self, game_id: str, limit: int = 20) -> list[HistoryRecord]:
        """Past decisions for a game, newest first."""

    @abstractmethod
    async def append_ledger(self, entry: LedgerEntry) -> None:
        """Append-only insert. Raises LedgerConflictError on duplicate id."""

    @abstractmethod
    async def fetch_ledger(
        self,
        game_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[LedgerEntry]:
        """Ledger entries, newest first, optionally for one game."""
