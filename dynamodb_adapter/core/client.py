"""
DynamoDB Adapter

This module provides a thin convenience layer over the boto3 DynamoDB client.
It owns one table name and one client handle and exposes:

1. Simple item operations (get/put/delete) on plain Python mappings
2. Sequential, chunked batch writes
3. Transparent query pagination with an optional result limit
4. Query helpers that build key condition and filter expressions with
   placeholder names and values, so reserved words are always safe

The adapter adds no retry, caching or transaction logic of its own.
Retries and timeouts come from the botocore configuration, and every
error reported by DynamoDB is logged and re-raised unchanged.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import ConnectionError, ValidationError
from ..expressions import Attribute, ExpressionBuilder
from ..translation import DocumentTranslator, TranslateConfig
from ..utils import chunk

logger = logging.getLogger(__name__)

Key = Dict[str, Any]
Item = Dict[str, Any]


class DynamoDBAdapter:
    """
    Convenience adapter for a single DynamoDB table.

    Items and keys are plain mappings; the adapter marshalls them through a
    ``DocumentTranslator`` and unmarshalls every response. The underlying
    botocore client is thread-safe and never reassigned after construction,
    so one adapter can be shared between threads.

    Example:
        adapter = DynamoDBAdapter("orders", DynamoDBConfig.from_env())
        adapter.put_item({"pk": "customer#1", "sk": "order#2024-01", "total": 42})
        orders = adapter.query_by_primary_key_and_sort_key(
            Attribute(name="pk", value="customer#1"),
            Attribute(name="sk", value="order#2024"),
        )
    """

    DEFAULT_BATCH_CHUNK_SIZE = 10

    @staticmethod
    def default_translate_config() -> TranslateConfig:
        """Translate configuration used when none is given.

        Drops None-valued fields and flattens class instances to mappings.
        """
        return TranslateConfig(
            remove_none_values=True,
            convert_class_instance_to_map=True,
        )

    def __init__(
        self,
        table_name: str,
        config: Optional[DynamoDBConfig] = None,
        translate_config: Optional[TranslateConfig] = None
    ):
        """Initialize the adapter and its DynamoDB client.

        Args:
            table_name: Name of the DynamoDB table
            config: Connection configuration, read from the environment if omitted
            translate_config: Marshalling options overriding the defaults

        Raises:
            ConnectionError: If the boto3 client cannot be created
        """
        self.table_name = table_name
        self.config = config or DynamoDBConfig.from_env()
        self.translator = DocumentTranslator(translate_config or self.default_translate_config())

        if self.config.enable_debug_logging:
            logging.getLogger('dynamodb_adapter').setLevel(logging.DEBUG)

        self._client = self._create_client()

    def _create_client(self):
        try:
            session = boto3.Session(
                aws_access_key_id=self.config.aws_access_key_id,
                aws_secret_access_key=self.config.aws_secret_access_key,
                aws_session_token=self.config.aws_session_token,
                region_name=self.config.region_name
            )

            client_kwargs = {
                'region_name': self.config.region_name
            }

            if self.config.endpoint_url:
                client_kwargs['endpoint_url'] = self.config.endpoint_url

            client_kwargs['config'] = Config(
                retries={'max_attempts': self.config.retries},
                max_pool_connections=self.config.max_pool_connections,
                read_timeout=self.config.timeout_seconds,
                connect_timeout=self.config.timeout_seconds
            )

            return session.client('dynamodb', **client_kwargs)
        except Exception as e:
            logger.error(f"Failed to create DynamoDB client: {e}")
            raise ConnectionError(
                f"Failed to connect to DynamoDB: {e}",
                e,
                {'region': self.config.region_name, 'endpoint': self.config.endpoint_url}
            ) from e

    @property
    def client(self):
        """The low-level boto3 DynamoDB client."""
        return self._client

    def _call(self, operation: str, **params) -> Dict[str, Any]:
        """Invoke a client operation and return its raw wire-format response."""
        logger.debug(f"{operation} on {self.table_name}: {params}")
        try:
            return getattr(self._client, operation)(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB {operation} on {self.table_name} failed: {e}")
            raise

    def _send(self, operation: str, **params) -> Dict[str, Any]:
        """Invoke a client operation and unmarshall its response."""
        return self.translator.translate_output(self._call(operation, **params))

    # -------------------------------------------------------------------------
    # Item operations
    # -------------------------------------------------------------------------

    def get_item(self, key: Key) -> Optional[Item]:
        """
        Fetch a single item by its primary key.

        Args:
            key: Partition key (and sort key) attributes

        Returns:
            The item, or None if no item exists at the key
        """
        response = self._send(
            'get_item',
            TableName=self.table_name,
            Key=self.translator.marshall(key)
        )
        return response.get('Item')

    def put_item(self, item: Any) -> Dict[str, Any]:
        """
        Insert or fully replace an item. The write is unconditional.

        Args:
            item: Mapping (or class instance) to store

        Returns:
            Translated PutItem response
        """
        response = self._send(
            'put_item',
            TableName=self.table_name,
            Item=self.translator.marshall(item)
        )
        logger.info(f"Put item in {self.table_name}")
        return response

    def delete_item(self, key: Key) -> Dict[str, Any]:
        """
        Delete the item at a key. Deleting a missing item is not an error.

        Args:
            key: Partition key (and sort key) attributes

        Returns:
            Translated DeleteItem response
        """
        response = self._send(
            'delete_item',
            TableName=self.table_name,
            Key=self.translator.marshall(key)
        )
        logger.info(f"Deleted item from {self.table_name}: {key}")
        return response

    def batch_write_item(
        self,
        items: Sequence[Any],
        chunk_size: int = DEFAULT_BATCH_CHUNK_SIZE
    ) -> List[Dict[str, Any]]:
        """
        Put many items using one BatchWriteItem request per chunk.

        Requests are sent one after another, never concurrently. Items that
        DynamoDB reports as unprocessed are NOT retried; they stay in the
        ``UnprocessedItems`` of the returned responses (see
        ``utils.collect_unprocessed_items``).

        Args:
            items: Items to write
            chunk_size: Maximum items per request (DynamoDB caps this at 25)

        Returns:
            Translated BatchWriteItem responses in submission order

        Raises:
            ValidationError: If chunk_size is smaller than 1
        """
        if chunk_size < 1:
            raise ValidationError(
                f"chunk_size must be a positive integer, got {chunk_size}",
                errors={'chunk_size': chunk_size}
            )

        items = list(items)
        results = []
        for group in chunk(items, chunk_size):
            response = self._send(
                'batch_write_item',
                RequestItems={
                    self.table_name: [
                        {'PutRequest': {'Item': self.translator.marshall(item)}} for item in group
                    ]
                }
            )

            unprocessed = (response.get('UnprocessedItems') or {}).get(self.table_name, [])
            if unprocessed:
                logger.warning(
                    f"{len(unprocessed)} of {len(group)} items left unprocessed in {self.table_name}; "
                    f"they are not retried"
                )

            results.append(response)

        logger.info(f"Batch wrote {len(items)} items to {self.table_name} in {len(results)} requests")
        return results

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _build_query_request(self, query_input: Mapping[str, Any]) -> Dict[str, Any]:
        request = {'TableName': self.table_name}
        request.update({k: v for k, v in query_input.items() if v is not None})

        if 'ExpressionAttributeValues' in request:
            request['ExpressionAttributeValues'] = self.translator.marshall_values(
                request['ExpressionAttributeValues']
            )
        if 'ExclusiveStartKey' in request:
            request['ExclusiveStartKey'] = self.translator.marshall(request['ExclusiveStartKey'])

        return request

    def query(self, query_input: Mapping[str, Any], limit: Optional[int] = None) -> List[Item]:
        """
        Run a Query and follow LastEvaluatedKey until all pages are read.

        Each page's items are appended as soon as the page arrives. Reading
        stops after a page without LastEvaluatedKey, or as soon as more than
        ``limit`` items have accumulated.

        Args:
            query_input: boto3 Query parameters with plain Python values in
                ExpressionAttributeValues; TableName defaults to this table
                and None-valued parameters are omitted
            limit: Maximum number of items to return, None for all

        Returns:
            Items of all pages in order, truncated to ``limit``

        Raises:
            ValidationError: If limit is negative
        """
        if limit is not None and limit < 0:
            raise ValidationError(f"limit must not be negative, got {limit}", errors={'limit': limit})

        request = self._build_query_request(query_input)
        result: List[Item] = []
        pages = 0

        while True:
            response = self._call('query', **request)
            pages += 1

            items = response.get('Items')
            if items is None:
                break
            result.extend(self.translator.unmarshall(item) for item in items)

            if limit is not None and len(result) > limit:
                logger.debug(f"Query on {self.table_name} reached limit {limit} after {pages} pages")
                return result[:limit]

            # Forwarded in wire format: unmarshalling may not round-trip numeric keys
            last_evaluated_key = response.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            request['ExclusiveStartKey'] = last_evaluated_key

        logger.debug(f"Query on {self.table_name} returned {len(result)} items in {pages} pages")
        return result if limit is None else result[:limit]

    def query_by_primary_key(self, partition_attribute: Attribute) -> List[Item]:
        """
        Return every item whose partition key equals the attribute's value.

        Args:
            partition_attribute: Partition key name and value

        Returns:
            All matching items
        """
        builder = ExpressionBuilder()
        key_condition = builder.equals(partition_attribute)
        return self.query({
            'TableName': self.table_name,
            'KeyConditionExpression': key_condition,
            'ExpressionAttributeNames': builder.names,
            'ExpressionAttributeValues': builder.values,
        })

    def query_by_primary_key_and_sort_key(
        self,
        partition_attribute: Attribute,
        sort_attribute: Attribute,
        index_name: Optional[str] = None
    ) -> List[Item]:
        """
        Return items matching a partition key whose sort key starts with a prefix.

        Args:
            partition_attribute: Partition key name and value
            sort_attribute: Sort key name and the prefix to match
            index_name: Secondary index to query instead of the table

        Returns:
            All matching items
        """
        builder = ExpressionBuilder()
        key_condition = f"{builder.equals(partition_attribute)} AND {builder.begins_with(sort_attribute)}"
        return self.query({
            'TableName': self.table_name,
            'IndexName': index_name,
            'KeyConditionExpression': key_condition,
            'ExpressionAttributeNames': builder.names,
            'ExpressionAttributeValues': builder.values,
        })

    def search_by_pkey(
        self,
        partition_attribute: Attribute,
        conditions: Optional[Mapping[str, Any]] = None
    ) -> List[Item]:
        """
        Return items of a partition whose attributes contain given substrings.

        Each non-None entry of ``conditions`` adds ``contains(attr, value)``;
        entries are AND-ed. None entries are skipped. The filter runs after
        the key condition, so filtered items still count against DynamoDB's
        per-page read size.

        Args:
            partition_attribute: Partition key name and value
            conditions: Attribute name to substring (or set member) to look for

        Returns:
            All matching items
        """
        builder = ExpressionBuilder()
        filters = [
            builder.contains(Attribute(name=name, value=value))
            for name, value in (conditions or {}).items()
            if value is not None
        ]
        key_condition = builder.equals(partition_attribute)

        return self.query({
            'TableName': self.table_name,
            'KeyConditionExpression': key_condition,
            'FilterExpression': ' AND '.join(filters) if filters else None,
            'ExpressionAttributeNames': builder.names,
            'ExpressionAttributeValues': builder.values,
        })


def create_adapter(
    config: DynamoDBConfig,
    table_name: str,
    translate_config: Optional[TranslateConfig] = None
) -> DynamoDBAdapter:
    """
    Factory function to create a DynamoDBAdapter instance.

    Args:
        config: DynamoDB configuration
        table_name: Base table name, resolved through config.get_table_name()
        translate_config: Optional marshalling options

    Returns:
        Configured DynamoDBAdapter instance
    """
    full_table_name = config.get_table_name(table_name)
    return DynamoDBAdapter(full_table_name, config, translate_config)
