"""
ContextBudget: token-bounded context assembly for AI document generation.

This package assembles prompt context from an always-included core text and a
pool of relevant project documents admitted under a hard token budget.
"""

__version__ = "0.1.0"
__author__ = "ContextBudget Team"

from .core.budget_manager import ContextBudgetManager
from .core.tokenizer_service import TokenizerService, estimate_tokens
from .core.context_store import CoreContext, CoreContextStore
from .core.injection_ledger import InjectionLedger, InjectedEntry, AdmissionResult, LedgerSnapshot
from .core.context_assembler import ContextAssembler, AssembledContext
from .services.relevance_scanner import (
    CandidateDocument,
    RelevanceScanner,
    InMemoryRelevanceScanner,
    MarkdownRelevanceScanner,
)
from .services.utilization_reporter import UtilizationReporter
from .config.settings import ContextBudgetConfig
from .errors import (
    ContextBudgetError,
    InvalidInputError,
    InvalidArgumentError,
    NotInitializedError,
    ConfigurationError,
    ScanError,
)

__all__ = [
    "ContextBudgetManager",
    "TokenizerService",
    "estimate_tokens",
    "CoreContext",
    "CoreContextStore",
    "InjectionLedger",
    "InjectedEntry",
    "AdmissionResult",
    "LedgerSnapshot",
    "ContextAssembler",
    "AssembledContext",
    "CandidateDocument",
    "RelevanceScanner",
    "InMemoryRelevanceScanner",
    "MarkdownRelevanceScanner",
    "UtilizationReporter",
    "ContextBudgetConfig",
    "ContextBudgetError",
    "InvalidInputError",
    "InvalidArgumentError",
    "NotInitializedError",
    "ConfigurationError",
    "ScanError",
]
