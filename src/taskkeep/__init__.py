"""taskkeep - to-do tasks persisted to a key-value settings store."""

__version__ = "0.1.0"
