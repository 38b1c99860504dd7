#!/usr/bin/env python3
"""
Basic usage examples for the DynamoDB adapter.

This example demonstrates:
1. Setting up configuration
2. Writing and reading single items
3. Batch writes and checking for unprocessed items
4. Partition key, sort key prefix and substring search queries
"""

import logging

from dynamodb_adapter import (
    Attribute,
    DynamoDBConfig,
    collect_unprocessed_items,
    create_adapter,
)


def main():
    """Demonstrate basic usage of the DynamoDB adapter."""
    logging.basicConfig(level=logging.INFO)

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.from_env()  # Uses environment variables

    # For DynamoDB Local, you might use:
    # config = DynamoDBConfig.for_local_development()

    # Table name resolves to "<prefix>_<environment>_orders" (no environment segment in prod)
    adapter = create_adapter(config, "orders")

    # 2. Single item operations
    print("2. Writing and reading an order...")
    adapter.put_item({
        "pk": "customer#42",
        "sk": "order#2024-05-01#001",
        "status": "OPEN",
        "note": "gift wrap please",
        "total": 129.90,
        "coupon": None,  # dropped before storage
    })
    stored = adapter.get_item({"pk": "customer#42", "sk": "order#2024-05-01#001"})
    print(f"   Stored order: {stored}")

    # 3. Batch writes
    print("3. Batch writing orders...")
    orders = [
        {"pk": "customer#42", "sk": f"order#2024-06-{day:02d}#001", "status": "OPEN", "note": f"order {day}"}
        for day in range(1, 16)
    ]
    results = adapter.batch_write_item(orders)
    unprocessed = collect_unprocessed_items(results, adapter.table_name)
    if unprocessed:
        # The adapter does not retry; re-submit yourself if delivery matters
        print(f"   {len(unprocessed)} orders were not processed, re-submitting")
        adapter.batch_write_item(unprocessed)

    # 4. Queries
    print("4. Querying orders...")
    customer = Attribute(name="pk", value="customer#42")

    all_orders = adapter.query_by_primary_key(customer)
    print(f"   All orders: {len(all_orders)}")

    june_orders = adapter.query_by_primary_key_and_sort_key(
        customer,
        Attribute(name="sk", value="order#2024-06"),
    )
    print(f"   June orders: {len(june_orders)}")

    gift_orders = adapter.search_by_pkey(customer, {"note": "gift", "status": None})
    print(f"   Orders mentioning a gift: {len(gift_orders)}")

    first_five = adapter.query(
        {
            "KeyConditionExpression": "#pk = :pk",
            "ExpressionAttributeNames": {"#pk": "pk"},
            "ExpressionAttributeValues": {":pk": "customer#42"},
            "ScanIndexForward": False,
        },
        limit=5,
    )
    print(f"   Five most recent orders: {[item['sk'] for item in first_five]}")

    # 5. Cleanup
    adapter.delete_item({"pk": "customer#42", "sk": "order#2024-05-01#001"})
    print("Done.")


if __name__ == "__main__":
    main()
