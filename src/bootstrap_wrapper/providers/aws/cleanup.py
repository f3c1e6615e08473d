"""
Test resource cleanup.

Removes everything the harness provisions. Also sweeps buckets left behind by
earlier interrupted runs, recognised by the shared bucket prefix.

Every step tolerates the target being absent, so cleanup can run twice in a
row, or after a run that never got to provision anything.
"""

from typing import TYPE_CHECKING, List

from botocore.exceptions import BotoCoreError, ClientError

from bootstrap_wrapper.core.exceptions import CleanupError, ResourceDeletionError
from bootstrap_wrapper.logger import logger
from . import lambda_manager

if TYPE_CHECKING:
    from bootstrap_wrapper.core.context import HarnessContext


def delete_deployment_zip_and_bucket(context: 'HarnessContext', bucket_name: str) -> None:
    """Delete the package object and then the bucket.

    Raises:
        ResourceDeletionError: For any failure other than NoSuchBucket,
            including transport errors
    """
    s3_client = context.provider.clients["s3"]
    zip_key = context.provider.naming.deployment_zip_key()

    try:
        # delete_object succeeds even if the key is not there
        s3_client.delete_object(Bucket=bucket_name, Key=zip_key)
        s3_client.delete_bucket(Bucket=bucket_name)
        logger.info(f"Deleted S3 bucket: {bucket_name}")
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise ResourceDeletionError("s3_bucket", bucket_name, e) from e
        logger.debug(f"S3 bucket {bucket_name} does not exist")
    except BotoCoreError as e:
        raise ResourceDeletionError("s3_bucket", bucket_name, e) from e


def delete_execution_role(context: 'HarnessContext') -> None:
    """Best-effort deletion of the execution role. Never raises."""
    role_name = context.provider.naming.execution_iam_role()
    try:
        context.provider.clients["iam"].delete_role(RoleName=role_name)
        logger.info(f"Deleted IAM role: {role_name}")
    except Exception as e:
        logger.warning(f"Could not delete IAM role {role_name}: {e}")


def cleanup(context: 'HarnessContext', role_already_existed: bool) -> None:
    """Delete the function, all harness buckets and (if created by this run) the role.

    Later steps run even when an earlier deletion fails; the failures are
    raised once everything has been attempted.

    Args:
        context: Run context
        role_already_existed: When True the execution role is left in place

    Raises:
        ResourceDeletionError: One function or bucket deletion failed
        CleanupError: Several deletions failed
    """
    failures: List[ResourceDeletionError] = []

    logger.info("[Lambda] Deleting function under test...")
    try:
        lambda_manager.delete_function_if_exists(context)
    except ResourceDeletionError as e:
        logger.error(str(e))
        failures.append(e)

    logger.info("[S3] Checking for harness buckets...")
    naming = context.provider.naming
    try:
        buckets = context.provider.clients["s3"].list_buckets().get("Buckets", [])
    except (ClientError, BotoCoreError) as e:
        error = ResourceDeletionError("s3_bucket", f"{context.config.bucket_prefix}*", e)
        logger.error(str(error))
        failures.append(error)
        buckets = []

    for bucket in buckets:
        if naming.is_harness_bucket(bucket["Name"]):
            try:
                delete_deployment_zip_and_bucket(context, bucket["Name"])
            except ResourceDeletionError as e:
                logger.error(str(e))
                failures.append(e)

    if not role_already_existed:
        logger.info("[IAM] Deleting execution role...")
        delete_execution_role(context)

    if len(failures) == 1:
        raise failures[0]
    if failures:
        raise CleanupError(failures)
