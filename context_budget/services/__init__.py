"""Service components for context budget management."""
