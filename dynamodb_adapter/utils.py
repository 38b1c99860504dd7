"""
Adapter Utilities

Pure helpers used by the adapter:
- Sequence chunking for batch writes
- Extraction of unprocessed items from batch write results
"""

from typing import Any, Dict, List, Sequence, TypeVar

T = TypeVar("T")


def chunk(sequence: Sequence[T], size: int) -> List[List[T]]:
    """Split a sequence into consecutive groups of at most ``size`` elements.

    Every group except possibly the last has exactly ``size`` elements.
    An empty sequence yields no groups.

    Args:
        sequence: Elements to split
        size: Group size, must be positive

    Returns:
        List of groups in input order

    Raises:
        ValueError: If size is smaller than 1

    Examples:
        >>> chunk([1, 2, 3, 4, 5, 6], 4)
        [[1, 2, 3, 4], [5, 6]]
        >>> chunk([], 6)
        []
    """
    if size < 1:
        raise ValueError(f"Chunk size must be a positive integer, got {size}")

    return [list(sequence[i:i + size]) for i in range(0, len(sequence), size)]


def collect_unprocessed_items(results: Sequence[Dict[str, Any]], table_name: str) -> List[Dict[str, Any]]:
    """Gather the items DynamoDB left unprocessed across batch write results.

    The adapter never re-submits these; callers that need guaranteed
    delivery pass the returned items to another batch write.

    Args:
        results: Translated BatchWriteItem responses
        table_name: Table whose requests should be collected

    Returns:
        Items of the unprocessed PutRequests, in result order
    """
    items = []
    for result in results:
        requests = (result.get('UnprocessedItems') or {}).get(table_name, [])
        for request in requests:
            put_request = request.get('PutRequest')
            if put_request is not None:
                items.append(put_request['Item'])
    return items


__all__ = [
    "chunk",
    "collect_unprocessed_items",
]
