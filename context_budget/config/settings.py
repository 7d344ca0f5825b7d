"""Configuration settings for context budget management."""

from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
import yaml
import json
from pathlib import Path

from ..errors import ConfigurationError


# Context windows of known models, in tokens.
MODEL_TOKEN_LIMITS: Dict[str, int] = {
    'gemini-1.5-flash': 1048576,
    'gemini-1.5-pro': 2097152,
    'gemini-2.0-flash-exp': 1048576,
    'gpt-4.1-mini': 8000,
    'gpt-4.1': 8000,
    'gpt-4o-mini': 128000,
    'gpt-4o': 128000,
    'gpt-4-turbo': 128000,
    'gpt-4': 128000,
    'gpt-3.5-turbo': 16385,
    'claude-3-opus': 200000,
    'claude-3-sonnet': 200000,
    'claude-3-haiku': 200000,
    'llama3.1': 131072,
    'llama3.2': 131072,
    'qwen2.5': 131072,
    'phi3': 131072,
}

DEFAULT_MAX_CONTEXT_TOKENS = 4000

# Share of the model window left for context once response and system prompt are reserved
CONTEXT_WINDOW_SHARE = 0.7

# Fractions of max_context_tokens per operation
EFFECTIVE_LIMIT_RATIOS: Dict[str, float] = {
    'core': 0.3,
    'enriched': 0.6,
    'full': 0.9,
}

TOKENIZER_BACKENDS = ('simple', 'tiktoken')

DEFAULT_SKIP_DIRS = [
    'node_modules', '.git', '.vscode', '.idea', 'dist', 'build',
    'coverage', '.nyc_output', 'logs', 'tmp', 'temp', '.cache',
    '__pycache__', '.venv', 'venv', '.tox', '.pytest_cache',
    'generated-documents',
]


@dataclass
class ScannerConfig:
    """Markdown scanner configuration."""
    max_depth: int = 3
    min_content_chars: int = 50
    skip_readme: bool = True
    skip_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))


@dataclass
class ContextBudgetConfig:
    """Main configuration for a context budget manager."""
    max_context_tokens: int = DEFAULT_MAX_CONTEXT_TOKENS
    injection_token_budget: Optional[int] = None
    model_name: Optional[str] = None
    chars_per_token: float = 3.5
    tokenizer_backend: str = 'simple'
    default_relevance_threshold: float = 75
    default_max_files: int = 10
    large_context_threshold: int = 50000
    scanner: ScannerConfig = field(default_factory=ScannerConfig)

    @property
    def effective_injection_budget(self) -> int:
        """Token ceiling for the injected pool."""
        if self.injection_token_budget is not None:
            return self.injection_token_budget
        return self.get_effective_token_limit('enriched')

    def get_effective_token_limit(self, operation: str) -> int:
        """Token limit for 'core', 'enriched' or 'full' context."""
        ratio = EFFECTIVE_LIMIT_RATIOS.get(operation)
        if ratio is None:
            return self.max_context_tokens
        return int(self.max_context_tokens * ratio)

    @classmethod
    def for_model(cls, model_name: str, **overrides) -> 'ContextBudgetConfig':
        """
        Create configuration sized for a known model.

        Args:
            model_name: Model identifier, matched by substring against known models
            **overrides: Additional field values

        Returns:
            ContextBudgetConfig with max_context_tokens derived from the model window
        """
        name = model_name.lower()
        max_tokens = DEFAULT_MAX_CONTEXT_TOKENS
        # Longest names first so 'gpt-4o-mini' is not matched as 'gpt-4'
        for known in sorted(MODEL_TOKEN_LIMITS, key=len, reverse=True):
            if known in name:
                limit = MODEL_TOKEN_LIMITS[known]
                if known.startswith('gpt-4.1'):
                    max_tokens = limit
                else:
                    max_tokens = max(max_tokens, int(limit * CONTEXT_WINDOW_SHARE))
                break

        overrides.setdefault('max_context_tokens', max_tokens)
        return cls(model_name=model_name, **overrides)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ContextBudgetConfig':
        """Create configuration from dictionary."""
        config_dict = dict(config_dict or {})
        try:
            scanner = ScannerConfig(**(config_dict.pop('scanner', None) or {}))

            model_name = config_dict.get('model_name')
            if model_name and 'max_context_tokens' not in config_dict:
                return cls.for_model(scanner=scanner, **config_dict)

            return cls(scanner=scanner, **config_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e

    @classmethod
    def from_yaml(cls, file_path: str) -> 'ContextBudgetConfig':
        """Load configuration from YAML file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_json(cls, file_path: str) -> 'ContextBudgetConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'max_context_tokens': self.max_context_tokens,
            'injection_token_budget': self.injection_token_budget,
            'model_name': self.model_name,
            'chars_per_token': self.chars_per_token,
            'tokenizer_backend': self.tokenizer_backend,
            'default_relevance_threshold': self.default_relevance_threshold,
            'default_max_files': self.default_max_files,
            'large_context_threshold': self.large_context_threshold,
            'scanner': {
                'max_depth': self.scanner.max_depth,
                'min_content_chars': self.scanner.min_content_chars,
                'skip_readme': self.scanner.skip_readme,
                'skip_dirs': list(self.scanner.skip_dirs),
            },
        }

    def save_yaml(self, file_path: str):
        """Save configuration to YAML file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def save_json(self, file_path: str):
        """Save configuration to JSON file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if self.max_context_tokens <= 0:
            issues.append("max_context_tokens must be positive")

        if self.injection_token_budget is not None:
            if self.injection_token_budget < 0:
                issues.append("injection_token_budget must be non-negative")
            elif self.injection_token_budget > self.max_context_tokens:
                issues.append("injection_token_budget exceeds max_context_tokens")

        if self.chars_per_token <= 0:
            issues.append("chars_per_token must be positive")

        if self.tokenizer_backend not in TOKENIZER_BACKENDS:
            issues.append(f"Unknown tokenizer backend: '{self.tokenizer_backend}'")

        if not 0 <= self.default_relevance_threshold <= 100:
            issues.append("default_relevance_threshold must be within [0, 100]")

        if self.default_max_files <= 0:
            issues.append("default_max_files must be positive")

        if self.scanner.max_depth < 0:
            issues.append("scanner.max_depth must be non-negative")

        return issues


def get_default_config() -> ContextBudgetConfig:
    """Get the default configuration (4000-token window, 60% injection budget)."""
    return ContextBudgetConfig()
