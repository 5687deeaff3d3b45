"""fintrack - document extraction service for personal finance records."""

__version__ = "0.1.0"
