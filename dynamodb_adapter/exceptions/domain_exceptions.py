"""
Adapter Exceptions

Exceptions raised by the adapter itself. Failures reported by DynamoDB
(botocore ``ClientError`` and friends) are not wrapped; they reach the
caller unchanged.

Organized by category:
1. Argument and Value Errors
2. Infrastructure Errors
"""

from typing import Any, Dict, Optional

from .base import DynamoDBAdapterError


# =============================================================================
# Argument and Value Errors
# =============================================================================

class ValidationError(DynamoDBAdapterError):
    """Raised when an adapter argument or an item value is unusable.

    Used for:
    - Invalid batch chunk sizes or query limits
    - Values the DynamoDB type serializer cannot represent
    - Items that do not translate to a mapping
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(DynamoDBAdapterError):
    """Raised when the DynamoDB client cannot be created.

    Used for:
    - Invalid credentials or session configuration
    - Invalid endpoint configurations
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., endpoint, region)
        """
        super().__init__(message, original_error, context)
