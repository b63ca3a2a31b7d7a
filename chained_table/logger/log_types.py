from enum import Enum
from typing import Dict


class LogEvent(str, Enum):
    TABLE_CREATED = "table_created"
    TABLE_RESIZED_UP = "table_resized_up"
    TABLE_RESIZED_DOWN = "table_resized_down"
    TABLE_DESTROYED = "table_destroyed"
    ALLOCATION_FAILED = "allocation_failed"
    INVALID_HASH_INDEX = "invalid_hash_index"


class TableLog(Dict):
    event: LogEvent
    size: int
    capacity: int


class ResizeLog(Dict):
    event: LogEvent
    old_capacity: int
    new_capacity: int
    size: int


class ErrorLog(Dict):
    event: LogEvent
    error: str
