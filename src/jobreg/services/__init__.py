"""Service layer: the consistency engine and the public per-kind services.

Core components (relationships, attributes, query, consistency) raise
``RegistryError`` subclasses and operate on an ``EntityStore`` inside a
caller-owned transaction. Public services own the transaction boundary
and return ``ServiceResult``.
"""
