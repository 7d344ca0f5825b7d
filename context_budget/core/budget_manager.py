"""Context budget manager: token-bounded injection of relevant documents."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .tokenizer_service import TokenizerService
from .context_store import CoreContext, CoreContextStore
from .injection_ledger import InjectionLedger
from .context_assembler import AssembledContext, ContextAssembler
from ..config.settings import ContextBudgetConfig
from ..errors import ConfigurationError, InvalidArgumentError, NotInitializedError
from ..services.relevance_scanner import CandidateDocument, MarkdownRelevanceScanner, RelevanceScanner
from ..services.utilization_reporter import UtilizationReporter

logger = logging.getLogger(__name__)

# Relevance recorded for files injected by explicit request
EXPLICIT_RELEVANCE_SCORE = 100.0

CandidateLike = Union[CandidateDocument, Mapping[str, Any]]


class ContextBudgetManager:
    """
    Owns one core context and one injection ledger for a generation session.

    Create one instance per session; instances share no mutable state and
    provide no internal locking.
    """

    def __init__(self,
                 scanner: Optional[RelevanceScanner] = None,
                 config: Optional[ContextBudgetConfig] = None,
                 tokenizer_service: Optional[TokenizerService] = None):
        """
        Initialize the manager.

        Args:
            scanner: RelevanceScanner used by injection passes
            config: ContextBudgetConfig; defaults are used when omitted
            tokenizer_service: Token estimator shared by every budget computation
        """
        self.config = config or ContextBudgetConfig()
        issues = self.config.validate()
        if issues:
            raise ConfigurationError("Invalid configuration: " + "; ".join(issues))

        self.tokenizer = tokenizer_service or TokenizerService(
            backend=self.config.tokenizer_backend,
            **({"chars_per_token": self.config.chars_per_token}
               if self.config.tokenizer_backend == "simple" else {})
        )
        self.scanner = scanner or MarkdownRelevanceScanner(
            max_depth=self.config.scanner.max_depth,
            min_content_chars=self.config.scanner.min_content_chars,
            skip_readme=self.config.scanner.skip_readme,
            skip_dirs=self.config.scanner.skip_dirs
        )
        self.core_store = CoreContextStore(self.tokenizer)
        self.ledger = InjectionLedger(self.config.effective_injection_budget, self.tokenizer)
        self.assembler = ContextAssembler(self.tokenizer)
        self.reporter = UtilizationReporter()

    @property
    def max_context_tokens(self) -> int:
        return self.config.max_context_tokens

    @property
    def is_initialized(self) -> bool:
        return self.core_store.is_initialized

    @property
    def core_context(self) -> Optional[CoreContext]:
        return self.core_store.context

    def supports_large_context(self) -> bool:
        return self.max_context_tokens > self.config.large_context_threshold

    def get_effective_token_limit(self, operation: str) -> int:
        return self.config.get_effective_token_limit(operation)

    def create_core_context(self, text: str) -> CoreContext:
        """
        Set the always-included core context, replacing any previous one.

        Args:
            text: Core context text

        Returns:
            The new CoreContext
        """
        core = self.core_store.initialize(text)
        core_limit = self.get_effective_token_limit('core')
        if core.token_count > core_limit:
            logger.warning(
                "Core context uses %d tokens, above the %d-token core limit",
                core.token_count, core_limit
            )
        logger.info("Core context initialized: %d tokens", core.token_count)
        return core

    def _require_initialized(self):
        if not self.core_store.is_initialized:
            raise NotInitializedError("Core context has not been created; call create_core_context first")

    async def inject_high_relevance_markdown_files(self,
                                                   root_path: str,
                                                   relevance_threshold: Optional[float] = None,
                                                   max_files: Optional[int] = None) -> int:
        """
        Admit the most relevant candidate documents under root_path.

        Candidates scoring at least relevance_threshold are tried highest
        score first. A candidate that does not fit is skipped and scanning
        continues, until max_files have been admitted or nothing left fits.
        The ledger is only touched after the scanner returns, so a failed
        or cancelled scan leaves it unchanged.

        Args:
            root_path: Root handed to the scanner
            relevance_threshold: Minimum score in [0, 100]
            max_files: Maximum admissions for this pass

        Returns:
            Number of documents admitted
        """
        self._require_initialized()

        if relevance_threshold is None:
            relevance_threshold = self.config.default_relevance_threshold
        if max_files is None:
            max_files = self.config.default_max_files
        self._validate_injection_args(relevance_threshold, max_files)

        raw_candidates = await self.scanner.scan(root_path)
        candidates = [self._coerce_candidate(c) for c in raw_candidates]

        ranked = self._rank_candidates(candidates, relevance_threshold)
        if not ranked:
            logger.info("No candidates scored >= %s under %s", relevance_threshold, root_path)
            return 0

        return self._admit_ranked(ranked, max_files)

    async def inject_specific_markdown_files(self, file_paths: Sequence[str], project_root: str) -> int:
        """
        Admit named markdown files in the given order.

        README files and files shorter than the scanner's minimum length are
        skipped; unreadable files are logged and skipped. Every file is read
        before any admission takes place.

        Returns:
            Number of documents admitted
        """
        self._require_initialized()
        documents = await asyncio.to_thread(self._read_specific_files, list(file_paths), project_root)
        return self._admit_ranked([(doc, self.tokenizer.estimate_tokens(doc.text)) for doc in documents],
                                  max_files=len(documents) or 1)

    def _read_specific_files(self, file_paths: List[str], project_root: str) -> List[CandidateDocument]:
        root = Path(project_root)
        min_chars = self.config.scanner.min_content_chars
        documents = []

        for file_path in file_paths:
            path = Path(file_path)
            if path.name.lower() == 'readme.md':
                continue
            try:
                content = path.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not inject %s: %s", file_path, e)
                continue
            if len(content) < min_chars:
                continue

            try:
                key = path.resolve().relative_to(root.resolve()).as_posix()
            except ValueError:
                key = path.as_posix()

            documents.append(CandidateDocument(
                path=key,
                text=content,
                relevance_score=EXPLICIT_RELEVANCE_SCORE,
                category='specific'
            ))

        return documents

    def _validate_injection_args(self, relevance_threshold: float, max_files: int):
        if isinstance(relevance_threshold, bool) or not isinstance(relevance_threshold, (int, float)):
            raise InvalidArgumentError(f"relevance_threshold must be a number, got {relevance_threshold!r}")
        if not 0 <= relevance_threshold <= 100:
            raise InvalidArgumentError(f"relevance_threshold must be within [0, 100], got {relevance_threshold}")
        if isinstance(max_files, bool) or not isinstance(max_files, int) or max_files <= 0:
            raise InvalidArgumentError(f"max_files must be a positive integer, got {max_files!r}")

    @staticmethod
    def _coerce_candidate(candidate: CandidateLike) -> CandidateDocument:
        if isinstance(candidate, CandidateDocument):
            return candidate
        if isinstance(candidate, Mapping):
            return CandidateDocument.from_mapping(candidate)
        raise InvalidArgumentError(f"Invalid candidate type: {type(candidate)}")

    def _rank_candidates(self,
                         candidates: List[CandidateDocument],
                         relevance_threshold: float) -> List[Tuple[CandidateDocument, int]]:
        """Filter by threshold and sort by score descending; sorted() is stable for ties."""
        eligible = [c for c in candidates if c.relevance_score >= relevance_threshold]
        ranked = sorted(eligible, key=lambda c: c.relevance_score, reverse=True)
        return [(c, self.tokenizer.estimate_tokens(c.text)) for c in ranked]

    def _admit_ranked(self, ranked: List[Tuple[CandidateDocument, int]], max_files: int) -> int:
        # suffix_min[i] is the cheapest candidate from position i onward
        suffix_min = [0] * len(ranked)
        cheapest = None
        for i in range(len(ranked) - 1, -1, -1):
            tokens = ranked[i][1]
            cheapest = tokens if cheapest is None else min(cheapest, tokens)
            suffix_min[i] = cheapest

        injected = 0
        for i, (candidate, tokens) in enumerate(ranked):
            if injected >= max_files:
                break
            if self.ledger.remaining_budget < suffix_min[i]:
                logger.info("Injection budget exhausted after %d documents", injected)
                break

            result = self.ledger.try_admit(
                key=candidate.path,
                text=candidate.text,
                relevance_score=candidate.relevance_score,
                budget_remaining=self.ledger.remaining_budget,
                category=candidate.category
            )
            if result.admitted:
                injected += 1
                logger.info(
                    "Injected %s (score: %g, tokens: ~%d)",
                    candidate.path, candidate.relevance_score, result.tokens_used
                )

        logger.info("Injected %d documents, %d tokens remaining", injected, self.ledger.remaining_budget)
        return injected

    def remove_injected_document(self, key: str) -> bool:
        """Remove one injected document; returns whether it was present."""
        removed = self.ledger.remove(key)
        if removed:
            logger.info("Removed injected document %s", key)
        return removed

    def assemble_context_for_document(self, document_type: str) -> AssembledContext:
        """Compose the context for a document type without changing any state."""
        self._require_initialized()
        return self.assembler.assemble_context(
            document_type,
            self.core_store.context,
            self.ledger.entries()
        )

    def build_context_for_document(self, document_type: str) -> str:
        """
        Compose core context plus every injected document.

        Every injected document is visible to every document type.

        Args:
            document_type: Consumer document type label

        Returns:
            Composed context string
        """
        return self.assemble_context_for_document(document_type).full_context

    def get_metrics(self) -> Dict[str, int]:
        """Get core context size and the overall token ceiling."""
        return {
            "core_context_tokens": self.core_store.get_token_count(),
            "max_tokens": self.max_context_tokens,
            "injected_count": len(self.ledger),
            "injection_token_budget": self.ledger.max_token_budget,
        }

    def get_injection_statistics(self) -> Dict[str, Any]:
        """Get injected document count, tokens, remaining budget and keys in admission order."""
        snapshot = self.ledger.snapshot()
        return {
            "total_injected": len(snapshot.entries),
            "total_tokens_injected": snapshot.total_tokens_injected,
            "remaining_token_budget": snapshot.remaining_budget,
            "injected_keys": snapshot.keys,
        }

    def get_context_utilization_report(self) -> str:
        return self.reporter.build_report(
            core_tokens=self.core_store.get_token_count(),
            snapshot=self.ledger.snapshot(),
            max_context_tokens=self.max_context_tokens,
            large_context=self.supports_large_context()
        )

    def analyze_document_context(self, document_type: str) -> Dict[str, Any]:
        """Analyze token usage of the context composed for document_type."""
        assembled = self.assemble_context_for_document(document_type)
        return self.reporter.analyze_document(assembled, self.max_context_tokens)

    def clear_injected_context(self) -> int:
        """Remove every injected document; the core context is untouched."""
        removed = self.ledger.clear()
        logger.info("Cleared %d injected context entries", removed)
        return removed
