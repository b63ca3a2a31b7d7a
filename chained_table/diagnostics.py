import os
from typing import List

import psutil

from chained_table.HashTable import HashTable


def format_table(table: HashTable) -> str:
    """Render every bucket as `[i]: (k:v) -> ... NULL`, head first."""
    lines = [f"Hash Table (size: {table.size}, capacity: {table.capacity}):"]
    for idx, chain in table.iter_buckets():
        links = "".join(f"({key}:{value}) -> " for key, value in chain)
        lines.append(f"[{idx}]: {links}NULL")
    return "\n".join(lines) + "\n"


def chain_lengths(table: HashTable) -> List[int]:
    return [len(chain) for _, chain in table.iter_buckets()]


def count_collisions(table: HashTable) -> int:
    """Number of nodes sharing a bucket with an earlier node (chain length - 1 per non-empty bucket)."""
    return sum(length - 1 for length in chain_lengths(table) if length > 1)


def get_memory_usage() -> int:
    """Return current process RSS memory usage in bytes."""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss
