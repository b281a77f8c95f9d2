"""Adapters module - repository implementations for the local cache.

- sqlite: SQLite storage, the only cache backend
"""
