from typing import Iterator, List, Optional, Tuple

from chained_table import config
from chained_table.errors import (
    AllocationFailure,
    CorruptTableError,
    InvalidHashIndex,
    TableDestroyedError,
)
from chained_table.hash_functions import HashFunction, improved_hash
from chained_table.logger.log_types import LogEvent
from chained_table.logger.logger import log_error_event, log_resize_event, log_table_event


class _Node:
    __slots__ = ("key", "value", "prev", "next")
    def __init__(self, key: int, value: int):
        self.key = key
        self.value = value
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None


def _empty_buckets(capacity: int) -> List[Optional[_Node]]:
    return [None] * capacity


def _check_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


class HashTable:
    """
    Separately chained hash table from int keys to int values.

    Every bucket holds the head of a doubly linked chain. New keys go to the
    head of their chain. After an insert the table doubles once the load
    factor passes GROW_LOAD_FACTOR; after an insert or a removal it halves
    once the load factor drops under SHRINK_LOAD_FACTOR, but never below
    MIN_CAPACITY. A resize relinks the existing nodes into a new bucket list.
    """

    def __init__(
        self,
        capacity: int = config.DEFAULT_CAPACITY,
        hash_function: Optional[HashFunction] = None,
        validate: Optional[bool] = None,
    ) -> None:
        _check_int("capacity", capacity)
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        hash_function = hash_function or improved_hash
        if not callable(hash_function):
            raise TypeError("hash_function must be callable")

        self._capacity = capacity
        self._size = 0
        self._hash = hash_function
        self._validate = config.VALIDATE_MUTATIONS if validate is None else validate
        self._destroyed = False
        # bumped on every structural change, checked by live iterators
        self._version = 0
        self._buckets = self._allocate(capacity)

        log_table_event(
            LogEvent.TABLE_CREATED,
            self._size,
            self._capacity,
            getattr(hash_function, "__name__", repr(hash_function)),
        )

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def hash_function(self) -> HashFunction:
        return self._hash

    @property
    def load_factor(self) -> float:
        return self._size / self._capacity

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key) -> bool:
        self._ensure_alive()
        _check_int("key", key)
        return self._find(self._bucket_index(key, self._capacity), key) is not None

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else f"size={self._size}, capacity={self._capacity}"
        return f"HashTable({state}, hash_function={getattr(self._hash, '__name__', self._hash)!r})"

    def __enter__(self) -> "HashTable":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    def insert(self, key: int, value: int) -> None:
        """Insert key or overwrite its value. Only a new key can resize the table."""
        self._ensure_alive()
        _check_int("key", key)
        _check_int("value", value)
        idx = self._bucket_index(key, self._capacity)

        node = self._find(idx, key)
        if node:
            node.value = value
            return

        self._link_head(self._buckets, idx, self._new_node(key, value))
        self._size += 1
        self._version += 1

        load_factor = self._size / self._capacity
        if load_factor > config.GROW_LOAD_FACTOR:
            self._resize(self._capacity * 2)
        elif self._capacity > config.MIN_CAPACITY and load_factor < config.SHRINK_LOAD_FACTOR:
            self._resize(max(self._capacity // 2, config.MIN_CAPACITY))

        if self._validate:
            self.check_invariants()

    def lookup(self, key: int) -> Optional[int]:
        """Return the value stored for key, or None if the key is absent."""
        self._ensure_alive()
        _check_int("key", key)
        node = self._find(self._bucket_index(key, self._capacity), key)
        return node.value if node else None

    def remove(self, key: int) -> bool:
        """Remove key. Returns False, changing nothing, if it was absent."""
        self._ensure_alive()
        _check_int("key", key)
        idx = self._bucket_index(key, self._capacity)

        node = self._find(idx, key)
        if not node:
            return False

        self._unlink(self._buckets, idx, node)
        self._size -= 1
        self._version += 1

        if self._capacity > config.MIN_CAPACITY and self._size / self._capacity < config.SHRINK_LOAD_FACTOR:
            self._resize(max(self._capacity // 2, config.MIN_CAPACITY))

        if self._validate:
            self.check_invariants()
        return True

    def destroy(self) -> None:
        """Release every node, then the bucket list. Safe to call twice."""
        if self._destroyed:
            return

        released = 0
        for idx, head in enumerate(self._buckets):
            node = head
            while node:
                next_node = node.next
                node.prev = None
                node.next = None
                node = next_node
                released += 1
            self._buckets[idx] = None

        self._buckets = []
        self._size = 0
        self._version += 1
        self._destroyed = True
        log_table_event(LogEvent.TABLE_DESTROYED, released, self._capacity)

    def items(self) -> Iterator[Tuple[int, int]]:
        """Yield every (key, value) pair, bucket by bucket, head first.

        The table must not be mutated while the iterator is in use.
        """
        self._ensure_alive()
        return self._iter_items(self._version)

    def iter_buckets(self) -> Iterator[Tuple[int, List[Tuple[int, int]]]]:
        """Yield (bucket index, [(key, value), ...]) for every bucket, empty ones included."""
        self._ensure_alive()
        return self._iter_buckets(self._version)

    def check_invariants(self) -> None:
        """Walk every chain and raise CorruptTableError on the first inconsistency."""
        self._ensure_alive()
        if len(self._buckets) != self._capacity:
            raise CorruptTableError(
                f"{len(self._buckets)} buckets allocated for capacity {self._capacity}"
            )

        seen = set()
        for idx, head in enumerate(self._buckets):
            prev = None
            node = head
            while node:
                if node.prev is not prev:
                    raise CorruptTableError(f"broken prev link at key {node.key} in bucket {idx}")
                if node.key in seen:
                    raise CorruptTableError(f"key {node.key} stored more than once")
                if self._hash(node.key, self._capacity) != idx:
                    raise CorruptTableError(f"key {node.key} is in bucket {idx}, hashes elsewhere")
                seen.add(node.key)
                if len(seen) > self._size:
                    raise CorruptTableError(f"more than {self._size} nodes reachable, chain may be cyclic")
                prev = node
                node = node.next

        if len(seen) != self._size:
            raise CorruptTableError(f"size is {self._size} but {len(seen)} nodes are reachable")

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise TableDestroyedError("hash table has been destroyed")

    def _bucket_index(self, key: int, capacity: int) -> int:
        idx = self._hash(key, capacity)
        if not isinstance(idx, int) or not 0 <= idx < capacity:
            log_error_event(
                LogEvent.INVALID_HASH_INDEX,
                f"hash of key {key} for capacity {capacity} returned {idx!r}",
            )
            raise InvalidHashIndex(
                f"hash function returned {idx!r} for key {key}, expected [0, {capacity})"
            )
        return idx

    def _find(self, idx: int, key: int) -> Optional[_Node]:
        node = self._buckets[idx]
        while node:
            if node.key == key:
                return node
            node = node.next
        return None

    def _new_node(self, key: int, value: int) -> _Node:
        try:
            return _Node(key, value)
        except MemoryError as e:
            log_error_event(LogEvent.ALLOCATION_FAILED, f"node for key {key}: {e}")
            raise AllocationFailure(f"could not allocate a node for key {key}") from e

    def _allocate(self, capacity: int) -> List[Optional[_Node]]:
        try:
            return _empty_buckets(capacity)
        except MemoryError as e:
            log_error_event(LogEvent.ALLOCATION_FAILED, f"bucket list of {capacity}: {e}")
            raise AllocationFailure(f"could not allocate {capacity} buckets") from e

    @staticmethod
    def _link_head(buckets: List[Optional[_Node]], idx: int, node: _Node) -> None:
        head = buckets[idx]
        node.prev = None
        node.next = head
        if head:
            head.prev = node
        buckets[idx] = node

    @staticmethod
    def _unlink(buckets: List[Optional[_Node]], idx: int, node: _Node) -> None:
        if node.prev:
            node.prev.next = node.next
        else:
            buckets[idx] = node.next
        if node.next:
            node.next.prev = node.prev
        node.prev = None
        node.next = None

    def _resize(self, new_capacity: int) -> None:
        old_capacity = self._capacity
        new_buckets = self._allocate(new_capacity)

        # Place every node before touching any link, so a failing hash
        # function leaves the old chains intact.
        try:
            placements = []
            for head in self._buckets:
                node = head
                while node:
                    placements.append((node, self._bucket_index(node.key, new_capacity)))
                    node = node.next
        except MemoryError as e:
            log_error_event(LogEvent.ALLOCATION_FAILED, f"rehash to {new_capacity}: {e}")
            raise AllocationFailure(f"could not rehash into {new_capacity} buckets") from e

        for node, idx in placements:
            node.prev = None
            node.next = None
            self._link_head(new_buckets, idx, node)

        self._buckets = new_buckets
        self._capacity = new_capacity
        self._version += 1

        event = LogEvent.TABLE_RESIZED_UP if new_capacity > old_capacity else LogEvent.TABLE_RESIZED_DOWN
        log_resize_event(event, old_capacity, new_capacity, self._size)

    def _iter_items(self, version: int) -> Iterator[Tuple[int, int]]:
        for head in self._buckets:
            node = head
            while node:
                yield node.key, node.value
                self._check_version(version)
                node = node.next
        self._check_version(version)

    def _iter_buckets(self, version: int) -> Iterator[Tuple[int, List[Tuple[int, int]]]]:
        for idx, head in enumerate(self._buckets):
            chain = []
            node = head
            while node:
                chain.append((node.key, node.value))
                node = node.next
            yield idx, chain
            self._check_version(version)

    def _check_version(self, version: int) -> None:
        if self._version != version:
            raise RuntimeError("hash table changed during iteration")


def create_hash_table(capacity: int, hash_function: HashFunction) -> HashTable:
    return HashTable(capacity, hash_function)
