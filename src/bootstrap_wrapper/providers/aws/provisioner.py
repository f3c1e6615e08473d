"""
Test resource provisioning.

Brings the AWS account into the state the scenarios need:
    1. Execution IAM role (reused if it already exists)
    2. Deployment bucket holding the package ZIP
    3. The Lambda function under test, freshly created

Every step is idempotent so a rerun after an interrupted run succeeds.
"""

import time
from typing import TYPE_CHECKING, Callable

from botocore.exceptions import ClientError

from bootstrap_wrapper import constants as CONSTANTS
from bootstrap_wrapper.core.exceptions import ResourceCreationError
from bootstrap_wrapper.logger import logger
from bootstrap_wrapper.util import resolve_deployment_package
from . import lambda_manager

if TYPE_CHECKING:
    from bootstrap_wrapper.core.context import HarnessContext


def ensure_execution_role(context: 'HarnessContext') -> bool:
    """Look up the execution role and create it if missing.

    Sets context.role_arn and context.role_already_existed.

    Returns:
        True if the role already existed
    """
    iam_client = context.provider.clients["iam"]
    role_name = context.provider.naming.execution_iam_role()

    try:
        response = iam_client.get_role(RoleName=role_name)
        context.role_arn = response["Role"]["Arn"]
        context.role_already_existed = True
        logger.info(f"Reusing existing IAM role: {role_name}")
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchEntity":
            raise ResourceCreationError("iam_role", role_name, e) from e

    try:
        response = iam_client.create_role(
            RoleName=role_name,
            Description=CONSTANTS.EXECUTION_ROLE_DESCRIPTION,
            AssumeRolePolicyDocument=CONSTANTS.LAMBDA_ASSUME_ROLE_POLICY
        )
    except ClientError as e:
        raise ResourceCreationError("iam_role", role_name, e) from e

    context.role_arn = response["Role"]["Arn"]
    context.role_already_existed = False
    logger.info(f"Created IAM role: {role_name}")
    return False


def create_bucket_with_deployment_zip(context: 'HarnessContext') -> None:
    """Create the run's bucket if needed and upload (or overwrite) the package."""
    s3_client = context.provider.clients["s3"]
    bucket_name = context.bucket_name
    zip_key = context.provider.naming.deployment_zip_key()
    package_path = resolve_deployment_package(context.config.deployment_package_path)

    existing = {b["Name"] for b in s3_client.list_buckets().get("Buckets", [])}
    if bucket_name not in existing:
        create_kwargs = {"Bucket": bucket_name}
        if context.provider.region != "us-east-1":
            create_kwargs["CreateBucketConfiguration"] = {
                "LocationConstraint": context.provider.region
            }
        try:
            s3_client.create_bucket(**create_kwargs)
        except ClientError as e:
            raise ResourceCreationError("s3_bucket", bucket_name, e) from e
        logger.info(f"Created S3 bucket: {bucket_name}")

    s3_client.upload_file(str(package_path), bucket_name, zip_key)
    logger.info(f"Uploaded deployment package {package_path} to s3://{bucket_name}/{zip_key}")


def prepare(
    context: 'HarnessContext',
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep
) -> bool:
    """Provision every resource the scenarios need.

    Args:
        context: Run context
        clock: Time source for the function-creation retry window
        sleep: Sleep function used between creation attempts

    Returns:
        True if the execution role already existed before this run

    Raises:
        ConfigurationError: If the deployment package cannot be found
        ResourceCreationError: If a resource cannot be created
        ProvisioningTimeoutError: If the role did not propagate in time
    """
    role_already_existed = ensure_execution_role(context)
    create_bucket_with_deployment_zip(context)

    lambda_manager.delete_function_if_exists(context)
    lambda_manager.create_function(context, clock=clock, sleep=sleep)

    return role_already_existed
