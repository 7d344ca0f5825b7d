"""Tests for MessageFormatter."""

from context_budget.core.context_assembler import ContextAssembler
from context_budget.core.context_store import CoreContext
from context_budget.core.injection_ledger import InjectedEntry
from context_budget.utils.message_formatter import MessageFormatter


def _assembled():
    core = CoreContext(text="Project X overview", token_count=6)
    entries = [
        InjectedEntry("a.md", "short text", 3, 95),
        InjectedEntry("c.md", "medium length content block", 8, 70),
    ]
    return ContextAssembler().assemble_context("project-charter", core, entries)


class TestMessageFormatter:
    """Test cases for MessageFormatter."""

    def test_openai_messages(self):
        """Test OpenAI message formatting."""
        assembled = _assembled()
        messages = MessageFormatter().to_openai_messages(assembled, "Write the project charter.")

        assert messages == [
            {"role": "system", "content": assembled.full_context},
            {"role": "user", "content": "Write the project charter."},
        ]

    def test_sectioned_messages(self):
        """Test one system message per section."""
        messages = MessageFormatter().to_sectioned_messages(_assembled(), "Write it.")

        assert [m["role"] for m in messages] == ["system", "system", "system", "user"]
        assert messages[0]["content"] == "Project X overview"
        assert messages[1]["content"] == "[a.md]\nshort text"
        assert messages[2]["content"].startswith("[c.md]")

    def test_sectioned_messages_custom_roles(self):
        """Test custom role mapping for sections."""
        messages = MessageFormatter().to_sectioned_messages(
            _assembled(), role_mapping={"core": "system", "injected": "user"}
        )
        assert [m["role"] for m in messages] == ["system", "user", "user"]

    def test_anthropic_payload(self):
        """Test Anthropic payload formatting."""
        assembled = _assembled()
        payload = MessageFormatter().to_anthropic_payload(assembled, "Write it.")

        assert payload["system"] == assembled.full_context
        assert payload["messages"] == [{"role": "user", "content": "Write it."}]

    def test_role_summary(self):
        """Test the section role summary."""
        summary = MessageFormatter().get_section_role_summary(_assembled())

        assert summary["document_type"] == "project-charter"
        assert summary["total_sections"] == 3
        assert summary["role_distribution"] == {"system": 3}
        assert [d["name"] for d in summary["section_details"]] == ["core", "a.md", "c.md"]
