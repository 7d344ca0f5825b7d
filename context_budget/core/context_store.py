"""Store for the always-included core context."""

from typing import Optional
from dataclasses import dataclass

from .tokenizer_service import TokenizerService
from ..errors import InvalidInputError


@dataclass(frozen=True)
class CoreContext:
    """Baseline text included in every composed context."""
    text: str
    token_count: int


class CoreContextStore:
    """Holds one CoreContext, replaced wholesale on each initialization."""

    def __init__(self, tokenizer_service: Optional[TokenizerService] = None):
        self.tokenizer = tokenizer_service or TokenizerService()
        self._context: Optional[CoreContext] = None

    def initialize(self, text: str) -> CoreContext:
        """
        Set the core context, replacing any previous one.

        Args:
            text: Core context text (for example a project README)

        Returns:
            The new CoreContext
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Core context text must be a non-empty string")

        self._context = CoreContext(text=text, token_count=self.tokenizer.estimate_tokens(text))
        return self._context

    @property
    def is_initialized(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[CoreContext]:
        return self._context

    def get_text(self) -> str:
        return self._context.text if self._context else ""

    def get_token_count(self) -> int:
        return self._context.token_count if self._context else 0
