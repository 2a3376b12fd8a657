"""Mini README: Key-value persistence backends for the ledger.

The ledger mirrors each collection to a string-keyed store after every
mutation. ``MemoryKeyValueStore`` keeps documents in a dictionary for tests
and embedded use, while ``JsonFileKeyValueStore`` writes one JSON file per key
inside the configured data directory.
"""

from .backends import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = ["JsonFileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]
