"""Bookkeeping for documents admitted into the injectable context pool."""

import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass

from .tokenizer_service import TokenizerService
from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InjectedEntry:
    """A document admitted into the ledger."""
    key: str
    text: str
    token_count: int
    relevance_score: float
    category: Optional[str] = None


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of a single admission attempt."""
    admitted: bool
    tokens_used: int
    reason: Optional[str] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Read-only view of ledger state."""
    entries: Tuple[InjectedEntry, ...]
    total_tokens_injected: int
    remaining_budget: int
    max_token_budget: int

    @property
    def keys(self) -> List[str]:
        return [entry.key for entry in self.entries]


class InjectionLedger:
    """
    Ordered record of injected documents under a fixed token ceiling.

    All admissions go through try_admit, which guarantees that
    total_tokens_injected never exceeds max_token_budget and that each
    key appears at most once.
    """

    def __init__(self, max_token_budget: int, tokenizer_service: Optional[TokenizerService] = None):
        if max_token_budget < 0:
            raise InvalidArgumentError(f"max_token_budget must be non-negative, got {max_token_budget}")
        self.max_token_budget = max_token_budget
        self.tokenizer = tokenizer_service or TokenizerService()
        # dicts keep insertion order, which is admission order
        self._entries: Dict[str, InjectedEntry] = {}
        self._total_tokens = 0

    @property
    def total_tokens_injected(self) -> int:
        return self._total_tokens

    @property
    def remaining_budget(self) -> int:
        return self.max_token_budget - self._total_tokens

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def try_admit(self,
                  key: str,
                  text: str,
                  relevance_score: float,
                  budget_remaining: Optional[int] = None,
                  category: Optional[str] = None) -> AdmissionResult:
        """
        Admit a document if it fits and is not already present.

        Args:
            key: Unique ledger key
            text: Document text
            relevance_score: Score in [0, 100]
            budget_remaining: Caller-side budget; the ledger's own remaining
                budget is always enforced as well
            category: Optional document category

        Returns:
            AdmissionResult; the ledger is unchanged when admitted is False
        """
        tokens = self.tokenizer.estimate_tokens(text)

        if key in self._entries:
            logger.debug("Skipping %s: already injected", key)
            return AdmissionResult(admitted=False, tokens_used=0, reason="duplicate")

        limit = self.remaining_budget
        if budget_remaining is not None:
            limit = min(limit, budget_remaining)

        if tokens > limit:
            logger.debug("Skipping %s: needs %d tokens, %d available", key, tokens, limit)
            return AdmissionResult(admitted=False, tokens_used=0, reason="over_budget")

        self._entries[key] = InjectedEntry(
            key=key,
            text=text,
            token_count=tokens,
            relevance_score=relevance_score,
            category=category
        )
        self._total_tokens += tokens
        return AdmissionResult(admitted=True, tokens_used=tokens)

    def remove(self, key: str) -> bool:
        """Remove an entry; returns whether it was present."""
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        self._total_tokens -= entry.token_count
        return True

    def clear(self) -> int:
        """Remove all entries; returns how many were removed."""
        removed = len(self._entries)
        self._entries.clear()
        self._total_tokens = 0
        return removed

    def get(self, key: str) -> Optional[InjectedEntry]:
        return self._entries.get(key)

    def entries(self) -> List[InjectedEntry]:
        return list(self._entries.values())

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            entries=tuple(self._entries.values()),
            total_tokens_injected=self._total_tokens,
            remaining_budget=self.remaining_budget,
            max_token_budget=self.max_token_budget
        )
