# Base exception class
from .base import DynamoDBAdapterError

from .domain_exceptions import (
    ConnectionError,
    ValidationError,
)

__all__ = [
    "DynamoDBAdapterError",
    "ConnectionError",
    "ValidationError",
]
