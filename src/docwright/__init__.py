"""docwright - LLM-assisted API documentation drafting."""

__version__ = "0.1.0"
