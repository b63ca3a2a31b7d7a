from chained_table.config import LOGGER_NAME
from chained_table.logger.log_types import LogEvent
import json
import logging

# Configured by the caller through logging.config.dictConfig(config.LOGGING)
logger = logging.getLogger(LOGGER_NAME)


def log_table_event(event: LogEvent, size: int, capacity: int, hash_function: str = None):
    """Log a table lifecycle event (with optional hash function name)"""
    log_data = {
        "event": event,
        "size": size,
        "capacity": capacity
    }
    if hash_function:
        log_data["hash_function"] = hash_function

    logger.info(json.dumps(log_data))


def log_resize_event(event: LogEvent, old_capacity: int, new_capacity: int, size: int):
    """Log a grow/shrink rehash"""
    logger.info(json.dumps({
        "event": event,
        "old_capacity": old_capacity,
        "new_capacity": new_capacity,
        "size": size
    }))


def log_error_event(event: LogEvent, error: str):
    """Log an error event"""
    logger.error(json.dumps({
        "event": event,
        "error": error
    }))
