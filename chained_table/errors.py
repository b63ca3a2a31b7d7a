class HashTableError(Exception):
    """Base class for every error raised by the hash table engine."""


class AllocationFailure(HashTableError, MemoryError):
    """Memory for a node or a bucket array could not be obtained.

    The table is left structurally consistent: a failed node allocation
    leaves it untouched, a failed bucket allocation leaves the old buckets
    in place.
    """


class InvalidHashIndex(HashTableError, ValueError):
    """The injected hash function returned something outside [0, capacity)."""


class TableDestroyedError(HashTableError, RuntimeError):
    pass


class CorruptTableError(HashTableError):
    """Raised by HashTable.check_invariants when the chains disagree with size or placement."""
