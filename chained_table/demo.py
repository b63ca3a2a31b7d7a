import argparse
import logging
import logging.config
import random
from typing import Optional

from chained_table.config import LOGGER_NAME, LOGGING
from chained_table.diagnostics import count_collisions, format_table, get_memory_usage
from chained_table.hash_functions import improved_hash, simple_hash
from chained_table.HashTable import HashTable

logger = logging.getLogger(LOGGER_NAME)


def _report_lookup(table: HashTable, key: int) -> None:
    value = table.lookup(key)
    if value is None:
        print(f"Key {key} not found")
    else:
        print(f"Found key {key} with value {value}")


def collision_walkthrough() -> None:
    with HashTable(10, simple_hash) as table:
        # 5, 15 and 25 share bucket 5; 6 and 16 share bucket 6
        for key in (5, 15, 25, 6, 16):
            table.insert(key, key * 100)

        print("After insertions:")
        print(format_table(table))

        _report_lookup(table, 15)
        _report_lookup(table, 7)

        print("\nRemoving key 15...")
        if table.remove(15):
            print("Key 15 removed successfully")
        else:
            print("Key 15 not found")

        print("\nAfter removal:")
        print(format_table(table))


def resize_demonstration(num_keys: int, num_removals: int) -> None:
    with HashTable(10, improved_hash) as table:
        print("Inserting elements to trigger resizing...")
        for i in range(num_keys):
            table.insert(i, i * 100)

        print("\nFinal hash table state:")
        print(f"Size: {table.size}, Capacity: {table.capacity}")

        print("\nRemoving elements to trigger shrinking...")
        for i in range(num_removals):
            table.remove(i)

        print("\nFinal hash table state after removals:")
        print(f"Size: {table.size}, Capacity: {table.capacity}")


def hash_function_comparison(samples: int, seed: Optional[int] = None) -> None:
    rng = random.Random(seed)
    with HashTable(10, simple_hash) as simple_table, HashTable(10, improved_hash) as improved_table:
        for _ in range(samples):
            key = rng.randrange(100)
            value = rng.randrange(1000)
            simple_table.insert(key, value)
            improved_table.insert(key, value)

        print(f"Simple hash function collisions: {count_collisions(simple_table)}")
        print(f"Improved hash function collisions: {count_collisions(improved_table)}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        description="Walk through insert, lookup, removal and resizing of a chained hash table."
    )
    parser.add_argument(
        "-k",
        "--keys",
        type=int,
        default=100,
        help="Number of sequential keys inserted by the resizing demonstration",
    )
    parser.add_argument(
        "-r",
        "--remove",
        type=int,
        default=80,
        help="Number of those keys removed again to trigger shrinking",
    )
    parser.add_argument(
        "-s",
        "--samples",
        type=int,
        default=20,
        help="Number of random keys used to compare the hash functions",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random keys (random by default)",
    )
    args = parser.parse_args(argv)

    logging.config.dictConfig(LOGGING)
    logger.info(f"Memory before demo: {get_memory_usage() / 1e6:.2f} MB")

    print("=== Hash Table Implementation ===\n")
    collision_walkthrough()

    print("=== Dynamic Resizing Demonstration ===\n")
    resize_demonstration(args.keys, args.remove)

    print("\n=== Hash Function Comparison ===\n")
    hash_function_comparison(args.samples, args.seed)

    logger.info(f"Memory after demo: {get_memory_usage() / 1e6:.2f} MB")


if __name__ == "__main__":
    main()
