"""
Bucket index strategies.

A strategy maps (key, capacity) to an index in [0, capacity). It must be pure:
a resize calls it again for every stored key with the new capacity.
"""

from typing import Callable

HashFunction = Callable[[int, int], int]

_MIX_MULTIPLIER = 0x45d9f3b
_WORD_MASK = 0xFFFFFFFF


def _check_capacity(capacity: int) -> None:
    if capacity <= 0:
        raise ValueError(f"capacity must be positive, got {capacity}")


def simple_hash(key: int, capacity: int) -> int:
    """key mod capacity. Consecutive keys and keys that differ by a multiple
    of capacity land in the same bucket."""
    _check_capacity(capacity)
    # Python's % already follows the divisor's sign; the fold keeps the
    # contract explicit for negative keys.
    index = key % capacity
    if index < 0:
        index += capacity
    return index


def improved_hash(key: int, capacity: int) -> int:
    """Multiply-xor-shift avalanche mix over the key's 32-bit word, then modulo.

    Negative keys are taken in two's complement, so -1 mixes as 0xFFFFFFFF.
    Keys that agree in their low 32 bits hash identically.
    """
    _check_capacity(capacity)
    x = key & _WORD_MASK
    x = (((x >> 16) ^ x) * _MIX_MULTIPLIER) & _WORD_MASK
    x = (((x >> 16) ^ x) * _MIX_MULTIPLIER) & _WORD_MASK
    x = (x >> 16) ^ x
    return x % capacity


HASH_FUNCTIONS = {
    "simple": simple_hash,
    "improved": improved_hash,
}
