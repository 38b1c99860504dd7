"""
Test helpers for the DynamoDB adapter.

Builders for raw DynamoDB responses used with mocked botocore clients.
"""

from botocore.exceptions import ClientError


def wire_item(**attributes):
    """Build a DynamoDB wire-format item from string attributes."""
    return {name: {'S': value} for name, value in attributes.items()}


def query_page(items, last_key=None):
    """Build a raw Query response page."""
    page = {'Items': items, 'Count': len(items), 'ScannedCount': len(items)}
    if last_key is not None:
        page['LastEvaluatedKey'] = last_key
    return page


def client_error(code, message="Test error", operation="Query"):
    """Build a botocore ClientError."""
    return ClientError(
        error_response={'Error': {'Code': code, 'Message': message}},
        operation_name=operation
    )


__all__ = [
    'wire_item',
    'query_page',
    'client_error',
]
