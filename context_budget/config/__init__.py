"""Configuration for context budget management."""
