"""Retrieval-augmented conversational agent with durable document ingestion."""

__version__ = "0.1.0"
