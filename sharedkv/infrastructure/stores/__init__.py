"""Backend Store adapters.

Provides concrete implementations of the BackendStore interface:
an in-process memory store and a disk-backed store that several
processes can share.
"""
