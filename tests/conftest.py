"""Shared fixtures for context budget tests."""

import pytest

from context_budget.config.settings import ContextBudgetConfig
from context_budget.core.budget_manager import ContextBudgetManager
from context_budget.services.relevance_scanner import CandidateDocument, InMemoryRelevanceScanner


@pytest.fixture
def example_candidates():
    """Three candidates with scores 95, 40 and 70."""
    return [
        CandidateDocument("a.md", "short text", 95),
        CandidateDocument("b.md", "a much longer piece of markdown content here", 40),
        CandidateDocument("c.md", "medium length content block", 70),
    ]


@pytest.fixture
def make_manager():
    """Factory building a manager over in-memory candidates."""
    def _make(candidates, **config_values):
        config = ContextBudgetConfig(**config_values)
        return ContextBudgetManager(scanner=InMemoryRelevanceScanner(candidates), config=config)
    return _make
