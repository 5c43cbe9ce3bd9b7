#!/usr/bin/env python3
"""
Create the problems table, e.g. against DynamoDB Local during development.

Usage:
    python scripts/create_problems_table.py [--table NAME] [--endpoint-url URL]
"""

import argparse
import logging
import os
import sys

import boto3
from botocore.exceptions import ClientError

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from utils.table_setup import create_problems_table

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Create the problems table")
    parser.add_argument(
        "--table",
        default=os.environ.get("PROBLEMS_TABLE", "problem-desk-problems-dev"),
        help="Table name",
    )
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("DYNAMODB_ENDPOINT_URL"),
        help="DynamoDB endpoint (for DynamoDB Local)",
    )
    args = parser.parse_args()

    dynamodb = boto3.resource(
        "dynamodb",
        region_name=os.environ.get("AWS_DEFAULT_REGION", "us-west-2"),
        endpoint_url=args.endpoint_url,
    )

    try:
        table = create_problems_table(dynamodb, args.table)
    except ClientError as e:
        logger.error("AWS error: %s", e.response["Error"]["Message"])
        return 1

    logger.info("Problems table ready: %s", table.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
