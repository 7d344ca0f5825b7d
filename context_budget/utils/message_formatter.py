"""
Message formatter for converting AssembledContext to LLM request payloads.
"""

from typing import List, Dict, Any, Optional

from ..core.context_assembler import AssembledContext


class MessageFormatter:
    """Converts AssembledContext to different LLM message formats."""

    def __init__(self):
        """Initialize message formatter."""
        # Section kind to role
        self.default_role_mapping = {
            "core": "system",
            "injected": "system",
        }

    def to_openai_messages(
        self,
        assembled_context: AssembledContext,
        instruction: str
    ) -> List[Dict[str, str]]:
        """
        Single system message carrying the full context, followed by the instruction.

        Args:
            assembled_context: Composed context
            instruction: Generation instruction for the document type

        Returns:
            OpenAI-style message list
        """
        messages = []
        if assembled_context.full_context.strip():
            messages.append({"role": "system", "content": assembled_context.full_context})
        messages.append({"role": "user", "content": instruction})
        return messages

    def to_sectioned_messages(
        self,
        assembled_context: AssembledContext,
        instruction: Optional[str] = None,
        role_mapping: Optional[Dict[str, str]] = None
    ) -> List[Dict[str, str]]:
        """
        One message per section, core first, injected documents in admission order.

        Args:
            assembled_context: Composed context
            instruction: Optional trailing user message
            role_mapping: Section kind to role mapping

        Returns:
            Message list
        """
        mapping = role_mapping or self.default_role_mapping
        messages = []

        for section in assembled_context.sections:
            if not section.content.strip():
                continue
            content = section.content
            if section.kind == "injected":
                content = f"[{section.name}]\n{content}"
            messages.append({
                "role": mapping.get(section.kind, "system"),
                "content": content
            })

        if instruction:
            messages.append({"role": "user", "content": instruction})
        return messages

    def to_anthropic_payload(
        self,
        assembled_context: AssembledContext,
        instruction: str
    ) -> Dict[str, Any]:
        """Anthropic-style payload: context as the system prompt, instruction as the user turn."""
        return {
            "system": assembled_context.full_context,
            "messages": [{"role": "user", "content": instruction}]
        }

    def get_section_role_summary(
        self,
        assembled_context: AssembledContext,
        role_mapping: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Summarize which role each section maps to.

        Args:
            assembled_context: Composed context
            role_mapping: Section kind to role mapping

        Returns:
            Summary with role distribution and section details
        """
        mapping = role_mapping or self.default_role_mapping

        summary = {
            "document_type": assembled_context.document_type,
            "total_sections": len(assembled_context.sections),
            "role_distribution": {},
            "section_details": []
        }

        role_counts = {}
        for section in assembled_context.sections:
            role = mapping.get(section.kind, "system")
            role_counts[role] = role_counts.get(role, 0) + 1
            summary["section_details"].append({
                "name": section.name,
                "kind": section.kind,
                "role": role,
                "tokens": section.token_count
            })

        summary["role_distribution"] = role_counts
        return summary
