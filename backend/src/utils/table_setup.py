"""Create the DynamoDB table used to store problems."""

import logging

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


def create_problems_table(dynamodb, table_name: str):
    """Create the problems table if it does not exist yet.

    Args:
        dynamodb: boto3 DynamoDB service resource
        table_name: Name of the table to create

    Returns:
        The table resource
    """
    try:
        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        table.wait_until_exists()
        logger.info("Created table %s", table_name)
        return table
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceInUseException":
            raise
        logger.info("Table %s already exists", table_name)
        return dynamodb.Table(table_name)
