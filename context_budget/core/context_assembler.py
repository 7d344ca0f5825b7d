"""Context assembler that composes core and injected content into one prompt context."""

from typing import Dict, List, Optional, Any, Iterable
from dataclasses import dataclass, field

from .tokenizer_service import TokenizerService
from .context_store import CoreContext
from .injection_ledger import InjectedEntry

INJECTED_SECTION_SEPARATOR = "\n\n---\n\n# Injected Project Context\n\n"
ENTRY_SEPARATOR = "\n\n"


@dataclass
class ContextSection:
    """Represents a section of composed context with metadata."""
    name: str
    content: str
    kind: str = "injected"
    token_count: int = 0
    relevance_score: Optional[float] = None
    category: Optional[str] = None


@dataclass
class AssembledContext:
    """Result of context assembly."""
    document_type: str
    full_context: str
    sections: List[ContextSection]
    total_tokens: int
    injected_keys: List[str] = field(default_factory=list)


def format_injected_entry(entry: InjectedEntry) -> str:
    """Wrap an entry's text with a marker naming its key."""
    header = f"## Injected Document: {entry.key}\n"
    if entry.category:
        header += f"**Category**: {entry.category}\n"
    header += f"**Relevance Score**: {entry.relevance_score:g}/100\n\n"
    return header + entry.text


class ContextAssembler:
    """Builds the context string handed to document generation."""

    def __init__(self, tokenizer_service: Optional[TokenizerService] = None):
        self.tokenizer = tokenizer_service or TokenizerService()

    def assemble_context(self,
                         document_type: str,
                         core_context: CoreContext,
                         entries: Iterable[InjectedEntry]) -> AssembledContext:
        """
        Compose core context followed by every injected entry.

        The document type labels the result; it does not filter entries.

        Args:
            document_type: Consumer document type, e.g. 'project-charter'
            core_context: Initialized core context
            entries: Injected entries in admission order

        Returns:
            AssembledContext with the composed string and per-section metadata
        """
        sections = [ContextSection(
            name="core",
            content=core_context.text,
            kind="core",
            token_count=core_context.token_count
        )]
        entry_parts = []

        for entry in entries:
            sections.append(ContextSection(
                name=entry.key,
                content=entry.text,
                token_count=entry.token_count,
                relevance_score=entry.relevance_score,
                category=entry.category
            ))
            entry_parts.append(format_injected_entry(entry))

        full_context = self._join_context_parts(core_context.text, entry_parts)

        return AssembledContext(
            document_type=document_type,
            full_context=full_context,
            sections=sections,
            total_tokens=self.tokenizer.estimate_tokens(full_context),
            injected_keys=[s.name for s in sections if s.kind == "injected"]
        )

    def _join_context_parts(self, core_text: str, entry_parts: List[str]) -> str:
        # Core text is kept verbatim
        if not entry_parts:
            return core_text
        return core_text + INJECTED_SECTION_SEPARATOR + ENTRY_SEPARATOR.join(entry_parts)

    def get_context_stats(self, assembled_context: AssembledContext) -> Dict[str, Any]:
        """Get statistics about the assembled context."""
        stats = {
            "document_type": assembled_context.document_type,
            "total_tokens": assembled_context.total_tokens,
            "total_sections": len(assembled_context.sections),
            "injected_sections": len(assembled_context.injected_keys),
            "section_details": []
        }

        for section in assembled_context.sections:
            share = section.token_count / assembled_context.total_tokens if assembled_context.total_tokens else 0
            stats["section_details"].append({
                "name": section.name,
                "kind": section.kind,
                "tokens": section.token_count,
                "relevance_score": section.relevance_score,
                "token_share": share
            })

        return stats
