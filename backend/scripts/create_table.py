"""
Create the DynamoDB table that holds asset meta and token records.
Key schema: ObjID (HASH, S) + ObjSort (RANGE, S), on-demand billing.
Run from backend/: python scripts/create_table.py --table assets [--endpoint-url http://localhost:8000]
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import boto3

from assetstore.core.config import get_settings
from assetstore.services.metatoken.keys import PARTITION_KEY, SORT_KEY


def create_table(table_name: str, region: str, endpoint_url: str | None = None) -> None:
    client = boto3.client("dynamodb", region_name=region, endpoint_url=endpoint_url)
    try:
        client.describe_table(TableName=table_name)
        print(f"Table {table_name} already exists.")
        return
    except client.exceptions.ResourceNotFoundException:
        pass
    client.create_table(
        TableName=table_name,
        AttributeDefinitions=[
            {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
            {"AttributeName": SORT_KEY, "AttributeType": "S"},
        ],
        KeySchema=[
            {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
            {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)
    print(f"Created table {table_name}.")


if __name__ == "__main__":
    settings = get_settings()
    parser = argparse.ArgumentParser()
    parser.add_argument("--table", default=settings.dynamodb_table, help="Table name (default: DYNAMODB_TABLE)")
    parser.add_argument("--region", default=settings.aws_region)
    parser.add_argument("--endpoint-url", default=settings.aws_endpoint_url)
    args = parser.parse_args()
    if not args.table:
        parser.error("--table or DYNAMODB_TABLE is required")
    create_table(args.table, args.region, args.endpoint_url)
