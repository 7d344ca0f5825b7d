"""Human-readable utilization reports derived from ledger and core context state."""

from typing import Any, Dict, List

from ..core.context_assembler import AssembledContext
from ..core.injection_ledger import LedgerSnapshot


class UtilizationReporter:
    """Read-only view over budget state; stores nothing."""

    def build_report(self,
                     core_tokens: int,
                     snapshot: LedgerSnapshot,
                     max_context_tokens: int,
                     large_context: bool = False) -> str:
        """
        Build a multi-line markdown utilization report.

        Args:
            core_tokens: Core context token count
            snapshot: Current ledger snapshot
            max_context_tokens: Overall prompt token ceiling
            large_context: Whether the model counts as large-context

        Returns:
            Markdown report
        """
        total_tokens = core_tokens + snapshot.total_tokens_injected
        utilization = self._percentage(total_tokens, max_context_tokens)

        lines = [
            "# Context Utilization Report",
            "",
            f"- **Core Context Tokens**: {core_tokens:,}",
            f"- **Injected Documents**: {len(snapshot.entries)}",
            f"- **Injected Tokens**: {snapshot.total_tokens_injected:,}",
            f"- **Injection Budget**: {snapshot.max_token_budget:,}",
            f"- **Remaining Injection Budget**: {snapshot.remaining_budget:,}",
            f"- **Max Token Limit**: {max_context_tokens:,}",
            f"- **Model Type**: {'Large Context (>50k)' if large_context else 'Standard Context'}",
            f"- **Context Utilization**: {utilization:.2f}%",
        ]

        if snapshot.entries:
            lines += ["", "## Injected Documents", ""]
            for entry in snapshot.entries:
                lines.append(
                    f"- `{entry.key}`: {entry.token_count:,} tokens "
                    f"(relevance {entry.relevance_score:g}/100)"
                )

        if large_context:
            lines += [""] + self._recommendations(utilization, max_context_tokens, total_tokens)

        return "\n".join(lines) + "\n"

    def _recommendations(self, utilization: float, max_context_tokens: int, total_tokens: int) -> List[str]:
        if utilization < 10:
            return [
                "## Optimization Recommendations",
                "- **Ultra-low utilization**: Consider adding more comprehensive project context",
                "- **Potential for enhancement**: Include additional documentation sources",
            ]
        if utilization < 30:
            headroom = (max_context_tokens - total_tokens) // 1000
            return [
                "## Good Performance",
                "- **Moderate utilization**: Good balance of context and efficiency",
                f"- **Room for growth**: Can include {headroom}k more tokens",
            ]
        return [
            "## Excellent Utilization",
            "- **High utilization**: Making good use of large context capabilities",
        ]

    def analyze_document(self, assembled: AssembledContext, max_context_tokens: int) -> Dict[str, Any]:
        """Summarize how much of the token ceiling one composed context uses."""
        utilization = self._percentage(assembled.total_tokens, max_context_tokens)
        recommendations = []

        if not assembled.injected_keys:
            recommendations.append("No injected documents; run an injection pass to enrich the context")
        if utilization > 90:
            recommendations.append("Context is close to the token limit; lower max files or raise the threshold")
        elif utilization < 10:
            recommendations.append("Context uses little of the available window; more documents could be injected")

        return {
            "document_type": assembled.document_type,
            "total_tokens": assembled.total_tokens,
            "utilization_percentage": utilization,
            "included_keys": list(assembled.injected_keys),
            "recommendations": recommendations,
        }

    @staticmethod
    def _percentage(tokens: int, max_tokens: int) -> float:
        return (tokens / max_tokens) * 100 if max_tokens > 0 else 0.0
