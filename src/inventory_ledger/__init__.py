"""
Inventory Ledger - per-owner inventory bookkeeping

This package keeps an append-style list of inventory items for every owner
principal, with global quantity/price bounds, soft deletes and a
non-reentrant mutation guard.

Main modules:
- inventory: data model, storage backends, the store and its service facade
- events: item notifications and the observer dispatcher
- api: HTTP API (FastAPI)
- cli: ledgerctl operator CLI
"""

__version__ = "0.1.0"
__author__ = "Inventory Ledger Team"

__all__ = ["__version__", "__author__"]
