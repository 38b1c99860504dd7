"""
Core adapter components.

- DynamoDBAdapter: convenience adapter over the boto3 DynamoDB client
- create_adapter: factory resolving table names through the configuration
"""

from .client import DynamoDBAdapter, create_adapter

__all__ = [
    "DynamoDBAdapter",
    "create_adapter",
]
