import os

DEFAULT_CAPACITY = 10
MIN_CAPACITY = 10
GROW_LOAD_FACTOR = 0.75
SHRINK_LOAD_FACTOR = 0.25

LOGZIO_API_KEY = os.getenv("logzIO_api_key")

# Check if we're in test mode
IS_TESTING = os.getenv("TESTING", "false").lower() == "true"

# Walk every chain after each mutation (slow, for debugging)
VALIDATE_MUTATIONS = os.getenv("CHAINED_TABLE_VALIDATE", "false").lower() == "true"

LOGGER_NAME = 'chained_table_logger'

TEST_LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
            'level': 'DEBUG'
        }
    },
    'loggers': {
        LOGGER_NAME: {
            'level': 'DEBUG',
            'handlers': ['null'],  # Use null handler to suppress logs during tests
            'propagate': False
        }
    }
}

CONSOLE_LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s: %(message)s',
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'simple',
            'stream': 'ext://sys.stdout'
        }
    },
    'loggers': {
        LOGGER_NAME: {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        }
    }
}

# Production logging configuration (logz.io)
PRODUCTION_LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'logzioFormat': {
            'format': '%(message)s',
        }
    },
    'handlers': {
        'logzio': {
            'class': 'logzio.handler.LogzioHandler',
            'level': 'INFO',
            'formatter': 'logzioFormat',
            'token': LOGZIO_API_KEY,
            'logzio_type': 'chained-table-logs',
            'logs_drain_timeout': 5,
            'url': 'https://listener-eu.logz.io:8071',
            'retries_no': 4,
            'retry_timeout': 2,
        }
    },
    'loggers': {
        LOGGER_NAME: {
            'level': 'DEBUG',
            'handlers': ['logzio'],
            'propagate': False
        }
    }
}

if IS_TESTING:
    LOGGING = TEST_LOGGING
elif LOGZIO_API_KEY:
    LOGGING = PRODUCTION_LOGGING
else:
    LOGGING = CONSOLE_LOGGING
