import pytest
import os
from unittest.mock import patch, MagicMock

os.environ.setdefault('TESTING', 'true')

from chained_table.hash_functions import simple_hash, improved_hash
from chained_table.HashTable import HashTable


@pytest.fixture(autouse=True)
def mock_logger():
    with patch('chained_table.logger.logger.logger') as mock_logger:
        mock_logger.info = MagicMock()
        mock_logger.error = MagicMock()
        yield mock_logger


@pytest.fixture
def simple_table():
    table = HashTable(10, simple_hash, validate=True)
    yield table
    table.destroy()


@pytest.fixture
def improved_table():
    table = HashTable(10, improved_hash, validate=True)
    yield table
    table.destroy()


@pytest.fixture
def colliding_keys():
    return [(5, 500), (15, 1500), (25, 2500)]
