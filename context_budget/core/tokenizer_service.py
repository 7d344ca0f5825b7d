"""Tokenizer service for consistent token estimation."""

import math
from typing import Dict, Union, List
from abc import ABC, abstractmethod

from ..errors import ConfigurationError

DEFAULT_CHARS_PER_TOKEN = 3.5


def estimate_tokens(text: str, chars_per_token: float = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Estimate token count as ceil(len(text) / chars_per_token)."""
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


class BaseTokenizer(ABC):
    """Abstract base class for tokenizers."""

    @abstractmethod
    def estimate_tokens(self, text: str) -> int:
        """Estimate token count for the given text."""
        pass


class SimpleTokenizer(BaseTokenizer):
    """Character-length heuristic tokenizer."""

    def __init__(self, chars_per_token: float = DEFAULT_CHARS_PER_TOKEN):
        if chars_per_token <= 0:
            raise ConfigurationError(f"chars_per_token must be positive, got {chars_per_token}")
        self.chars_per_token = chars_per_token

    def estimate_tokens(self, text: str) -> int:
        return estimate_tokens(text, self.chars_per_token)


class TiktokenTokenizer(BaseTokenizer):
    """Tokenizer backed by tiktoken encodings."""

    def __init__(self, encoding_name: str = "cl100k_base"):
        try:
            import tiktoken
        except ImportError as e:
            raise ConfigurationError(
                "The 'tiktoken' backend requires the tiktoken package "
                "(pip install context-budget[tiktoken])", cause=e
            ) from e
        self.encoding = tiktoken.get_encoding(encoding_name)

    def estimate_tokens(self, text: str) -> int:
        if not text:
            return 0
        return len(self.encoding.encode(text))


class TokenizerService:
    """Unified token estimation shared by every budget computation."""

    def __init__(self, backend: str = "simple", **kwargs):
        """
        Initialize tokenizer service.

        Args:
            backend: Tokenizer backend ('simple', 'tiktoken')
            **kwargs: Additional arguments for the backend
        """
        if backend == "simple":
            self.tokenizer: BaseTokenizer = SimpleTokenizer(**kwargs)
        elif backend == "tiktoken":
            self.tokenizer = TiktokenTokenizer(**kwargs)
        else:
            raise ConfigurationError(f"Unknown tokenizer backend: {backend}")
        self.backend = backend

    def estimate_tokens(self, text: Union[str, List[str], Dict[str, str]]) -> int:
        """
        Estimate tokens in text.

        Args:
            text: String, list of strings, or dict of strings

        Returns:
            Estimated token count
        """
        if isinstance(text, str):
            return self.tokenizer.estimate_tokens(text)
        elif isinstance(text, list):
            return sum(self.tokenizer.estimate_tokens(item) for item in text)
        elif isinstance(text, dict):
            total = 0
            for key, value in text.items():
                total += self.tokenizer.estimate_tokens(str(key))
                total += self.tokenizer.estimate_tokens(str(value))
            return total
        else:
            return self.tokenizer.estimate_tokens(str(text))

    def estimate_breakdown(self, text: Dict[str, str]) -> Dict[str, int]:
        """
        Estimate tokens for each section in a dictionary.

        Args:
            text: Dictionary of text sections

        Returns:
            Dictionary with token counts for each section plus a 'total'
        """
        breakdown = {}
        total = 0

        for key, value in text.items():
            count = self.estimate_tokens(value)
            breakdown[key] = count
            total += count

        breakdown["total"] = total
        return breakdown

    def get_tokenizer_info(self) -> Dict[str, Union[str, float]]:
        """Get information about the current tokenizer."""
        info: Dict[str, Union[str, float]] = {
            "backend": type(self.tokenizer).__name__,
        }
        if isinstance(self.tokenizer, SimpleTokenizer):
            info["chars_per_token"] = self.tokenizer.chars_per_token
        elif isinstance(self.tokenizer, TiktokenTokenizer):
            info["encoding_name"] = self.tokenizer.encoding.name
        return info
