"""Tests for TokenizerService."""

import pytest

from context_budget.core.tokenizer_service import (
    SimpleTokenizer,
    TokenizerService,
    estimate_tokens,
)
from context_budget.errors import ConfigurationError


class TestEstimateTokens:
    """Test cases for the character-length heuristic."""

    def test_empty_text_is_zero(self):
        """Test empty text estimates to zero."""
        assert estimate_tokens("") == 0

    def test_rounds_up(self):
        """Test that partial tokens round up."""
        assert estimate_tokens("abcdefg") == 2  # 7 / 3.5
        assert estimate_tokens("abcdefgh") == 3  # 8 / 3.5

    def test_custom_divisor(self):
        """Test a custom characters-per-token divisor."""
        assert estimate_tokens("abcd", chars_per_token=4) == 1
        assert estimate_tokens("abcde", chars_per_token=4) == 2

    def test_project_overview_example(self):
        """Test the estimate for a short overview."""
        assert estimate_tokens("Project X overview") == 6


class TestTokenizerService:
    """Test cases for TokenizerService."""

    def test_default_backend_is_simple(self):
        """Test the default backend."""
        service = TokenizerService()
        assert isinstance(service.tokenizer, SimpleTokenizer)
        assert service.tokenizer.chars_per_token == 3.5

    def test_estimate_list(self):
        """Test estimating a list of texts."""
        service = TokenizerService()
        assert service.estimate_tokens(["abcdefg", "abcdefgh"]) == 5

    def test_estimate_dict_counts_keys_and_values(self):
        """Test dictionary estimates count keys and values."""
        service = TokenizerService()
        # "key" -> 1, "abcdefgh" -> 3
        assert service.estimate_tokens({"key": "abcdefgh"}) == 4

    def test_estimate_breakdown(self):
        """Test per-key token breakdown."""
        service = TokenizerService()
        breakdown = service.estimate_breakdown({"core": "abcdefg", "docs": "abcdefgh"})

        assert breakdown["core"] == 2
        assert breakdown["docs"] == 3
        assert breakdown["total"] == 5

    def test_unknown_backend(self):
        """Test an unknown backend is rejected."""
        with pytest.raises(ConfigurationError):
            TokenizerService(backend="unknown")

    def test_invalid_chars_per_token(self):
        """Test a non-positive divisor is rejected."""
        with pytest.raises(ConfigurationError):
            TokenizerService(chars_per_token=0)

    def test_tokenizer_info(self):
        """Test tokenizer info."""
        info = TokenizerService(chars_per_token=4.0).get_tokenizer_info()
        assert info == {"backend": "SimpleTokenizer", "chars_per_token": 4.0}

    def test_tiktoken_backend(self):
        """Test the tiktoken backend when the library is installed."""
        pytest.importorskip("tiktoken")
        service = TokenizerService(backend="tiktoken")

        assert service.estimate_tokens("") == 0
        assert service.estimate_tokens("hello world") > 0
        assert service.get_tokenizer_info()["encoding_name"] == "cl100k_base"
