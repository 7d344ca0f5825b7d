#!/usr/bin/env python3
"""
Example usage of ContextBudget package.
"""

import asyncio

from context_budget import (
    CandidateDocument,
    ContextBudgetConfig,
    ContextBudgetManager,
    InMemoryRelevanceScanner,
)
from context_budget.utils.message_formatter import MessageFormatter


async def main():
    """Demonstrate ContextBudget functionality."""

    print("=== ContextBudget Example ===\n")

    scanner = InMemoryRelevanceScanner([
        CandidateDocument("docs/architecture.md",
                          "# Architecture\n\nThe service is split into an API layer and a document generator.",
                          92, "development"),
        CandidateDocument("notes/meeting.md",
                          "Weekly sync notes: nothing decided yet.",
                          35),
        CandidateDocument("requirements/scope.md",
                          "# Scope\n\nIn scope: stakeholder register, risk register, project charter.",
                          81, "planning"),
    ])
    config = ContextBudgetConfig(max_context_tokens=4000, injection_token_budget=1000)
    manager = ContextBudgetManager(scanner=scanner, config=config)

    print("1. Core Context")
    print("-" * 30)
    core = manager.create_core_context("Project X builds PMBOK-aligned documentation from a README.")
    print(f"Core context tokens: {core.token_count}")
    print()

    print("2. Injection Pass")
    print("-" * 30)
    injected = await manager.inject_high_relevance_markdown_files("project-root", relevance_threshold=60, max_files=5)
    stats = manager.get_injection_statistics()
    print(f"Injected documents: {injected}")
    print(f"Injected keys: {stats['injected_keys']}")
    print(f"Tokens injected: {stats['total_tokens_injected']}")
    print(f"Remaining budget: {stats['remaining_token_budget']}")
    print()

    print("3. Context for a Document Type")
    print("-" * 30)
    context = manager.build_context_for_document("project-charter")
    print(context)
    print()

    print("4. Utilization Report")
    print("-" * 30)
    print(manager.get_context_utilization_report())

    print("5. Request Messages")
    print("-" * 30)
    assembled = manager.assemble_context_for_document("project-charter")
    for msg in MessageFormatter().to_openai_messages(assembled, "Write the project charter."):
        print(f"  {msg['role']}: {msg['content'][:60]}...")
    print()

    manager.clear_injected_context()
    print(f"After clear: {manager.get_injection_statistics()}")


if __name__ == "__main__":
    asyncio.run(main())
