"""PASH: AI-powered pre-push code review."""

__version__ = "1.0.0"
