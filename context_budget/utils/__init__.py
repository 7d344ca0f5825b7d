"""Utilities for handing composed context to LLM clients."""
