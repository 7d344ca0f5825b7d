"""Core token accounting and context composition."""
