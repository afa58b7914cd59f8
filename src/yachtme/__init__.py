"""YACHT~ME - Riviera Sea Life charter site backend."""

__version__ = "0.1.0"
