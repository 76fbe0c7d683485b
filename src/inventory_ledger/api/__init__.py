"""
HTTP API for the inventory ledger.
"""

__all__ = ["inventory_api", "http_server"]
