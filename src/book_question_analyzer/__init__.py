"""Book Question Analyzer - Answer free-text questions about a novel's events."""

__version__ = "0.1.0"
