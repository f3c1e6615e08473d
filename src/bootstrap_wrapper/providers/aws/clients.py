"""
AWS SDK client initialization.

Design Decision:
    We return a dictionary of clients rather than individual module-level
    variables. This allows the provider to manage client lifecycle and
    enables easy testing via mocking.

Usage:
    from bootstrap_wrapper.providers.aws.clients import create_aws_clients

    clients = create_aws_clients(region="us-west-2")
    # clients["iam"], clients["lambda"], clients["s3"]
"""

from typing import Dict, Any, Optional
import boto3


def create_aws_clients(
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    region: str = "us-west-2"
) -> Dict[str, Any]:
    """
    Create and return the boto3 clients the harness needs.

    When no access keys are passed, boto3 resolves credentials through its
    default chain.

    Args:
        access_key_id: AWS access key ID (optional)
        secret_access_key: AWS secret access key (optional)
        region: AWS region (e.g., "us-west-2")

    Returns:
        Dictionary mapping service names to boto3 client instances.

    Client Keys:
        - iam: Execution role lookup/creation/deletion
        - lambda: Function create/configure/invoke/delete
        - s3: Deployment bucket and package object
    """
    config = {"region_name": region}
    if access_key_id and secret_access_key:
        config["aws_access_key_id"] = access_key_id
        config["aws_secret_access_key"] = secret_access_key

    return {
        "iam": boto3.client("iam", **config),
        "lambda": boto3.client("lambda", **config),
        "s3": boto3.client("s3", **config),
    }
