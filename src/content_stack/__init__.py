"""content-stack: document mutations and content release lifecycle over a structured-content backend."""

__version__ = "0.1.0"
