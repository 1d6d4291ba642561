"""Byte-keyed storage helpers, token transaction history, response padding and example contracts."""

__version__ = "0.1.0"

__all__ = [
    "platform",
    "storage",
    "traits",
    "transaction_history",
    "padding",
    "voting",
    "counter",
]