"""Helpers for Azure Cosmos DB: setup, item operations, query metrics, emulator tokens and trigger parsing."""

__version__ = "0.1.0"
__all__ = ["auth", "common", "errors", "metrics", "operations", "trigger"]