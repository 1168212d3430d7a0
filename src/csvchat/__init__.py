"""Chat with a CSV file through a hosted LLM."""

__version__ = "0.1.0"
