"""Library lending backend: catalog, membership and the loan ledger."""

__version__ = "1.0.0"
