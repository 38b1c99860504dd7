"""
DynamoDB Adapter

A thin convenience wrapper around the boto3 DynamoDB client with simplified
get/put/delete/batch-write operations, transparent query pagination and
placeholder-based key condition and filter helpers.
"""

from .config import DynamoDBConfig
from .core import (
    DynamoDBAdapter,
    create_adapter,
)
from .exceptions import (
    ConnectionError,
    DynamoDBAdapterError,
    ValidationError,
)
from .expressions import (
    Attribute,
    ExpressionBuilder,
    ExpressionFragment,
    build_expression_fragment,
)
from .translation import DocumentTranslator, TranslateConfig
from .utils import chunk, collect_unprocessed_items

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",
    "TranslateConfig",

    # Exceptions
    "ConnectionError",
    "DynamoDBAdapterError",
    "ValidationError",

    # Adapter
    "DynamoDBAdapter",
    "create_adapter",

    # Expressions
    "Attribute",
    "ExpressionBuilder",
    "ExpressionFragment",
    "build_expression_fragment",

    # Translation and utilities
    "DocumentTranslator",
    "chunk",
    "collect_unprocessed_items",
]
