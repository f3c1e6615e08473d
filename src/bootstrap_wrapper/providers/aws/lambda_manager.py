"""
AWS Lambda Manager - Lambda Function Operations.

This module provides the Lambda calls the harness makes against the single
function under test: create (with role-propagation retry), reconfigure the
handler, invoke, and delete.
"""

import json
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional
import time

from botocore.exceptions import BotoCoreError, ClientError

from bootstrap_wrapper import constants as CONSTANTS
from bootstrap_wrapper.core.exceptions import (
    ProvisioningTimeoutError,
    ResourceCreationError,
    ResourceDeletionError,
)
from bootstrap_wrapper.core.retry import RetryWindowExceeded, retry_until_timeout
from bootstrap_wrapper.logger import logger

if TYPE_CHECKING:
    from bootstrap_wrapper.core.context import HarnessContext


def _is_role_propagation_error(error: Exception) -> bool:
    """True for the error Lambda returns while a new role is still propagating."""
    if not isinstance(error, ClientError):
        return False
    err = error.response.get("Error", {})
    return (
        err.get("Code") == "InvalidParameterValueException"
        and err.get("Message") == CONSTANTS.ROLE_NOT_ASSUMABLE_MESSAGE
    )


def delete_function_if_exists(context: 'HarnessContext') -> bool:
    """Delete the function under test.

    Returns:
        True if a function was deleted, False if none existed

    Raises:
        ResourceDeletionError: For any failure other than ResourceNotFoundException,
            including transport errors
    """
    function_name = context.provider.naming.lambda_function()
    try:
        context.provider.clients["lambda"].delete_function(FunctionName=function_name)
        logger.info(f"Deleted Lambda function: {function_name}")
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            logger.debug(f"Lambda function {function_name} does not exist")
            return False
        raise ResourceDeletionError("lambda_function", function_name, e) from e
    except BotoCoreError as e:
        raise ResourceDeletionError("lambda_function", function_name, e) from e


def create_function(
    context: 'HarnessContext',
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep
) -> Dict[str, Any]:
    """Create the function under test from the uploaded deployment package.

    Creation is retried while IAM reports that the execution role cannot be
    assumed yet, bounded by config.role_propagation_timeout_seconds.

    Args:
        context: Run context; role_arn and bucket_name must be set
        clock: Monotonic time source for the retry window
        sleep: Sleep function used between attempts

    Returns:
        The create_function response

    Raises:
        ProvisioningTimeoutError: If the role never became assumable in time
        ResourceCreationError: For any other creation failure
    """
    config = context.config
    lambda_client = context.provider.clients["lambda"]
    function_name = context.provider.naming.lambda_function()

    create_kwargs = {
        "FunctionName": function_name,
        "Code": {
            "S3Bucket": context.bucket_name,
            "S3Key": context.provider.naming.deployment_zip_key(),
        },
        "Handler": config.initial_handler,
        "MemorySize": config.memory_size,
        "Runtime": config.runtime,
        "Role": context.role_arn,
    }

    def _attempt():
        return lambda_client.create_function(**create_kwargs)

    try:
        response = retry_until_timeout(
            _attempt,
            is_retryable=_is_role_propagation_error,
            timeout_seconds=config.role_propagation_timeout_seconds,
            delay_seconds=config.role_propagation_retry_delay_seconds,
            clock=clock,
            sleep=sleep,
        )
    except RetryWindowExceeded as e:
        raise ProvisioningTimeoutError(function_name, e.timeout_seconds) from e
    except ClientError as e:
        raise ResourceCreationError("lambda_function", function_name, e) from e

    logger.info(f"Created Lambda function: {function_name}")

    waiter = lambda_client.get_waiter("function_active")
    waiter.wait(FunctionName=function_name)
    return response


def update_handler(context: 'HarnessContext', handler: str) -> None:
    """Point the function under test at a different handler (entry point)."""
    lambda_client = context.provider.clients["lambda"]
    function_name = context.provider.naming.lambda_function()

    lambda_client.update_function_configuration(
        FunctionName=function_name,
        Handler=handler
    )

    waiter = lambda_client.get_waiter("function_updated")
    waiter.wait(FunctionName=function_name)
    logger.debug(f"Updated handler of {function_name} to {handler}")


def invoke_function(context: 'HarnessContext', payload: Any) -> Dict[str, Any]:
    """Invoke the function under test synchronously.

    Args:
        context: Run context
        payload: JSON-encodable value sent as the request payload

    Returns:
        Dictionary with StatusCode, FunctionError (None when absent) and the
        decoded-to-text Payload
    """
    function_name = context.provider.naming.lambda_function()
    response = context.provider.clients["lambda"].invoke(
        FunctionName=function_name,
        InvocationType="RequestResponse",
        Payload=json.dumps(payload)
    )

    raw_payload = response["Payload"]
    if hasattr(raw_payload, "read"):
        raw_payload = raw_payload.read()
    if isinstance(raw_payload, bytes):
        raw_payload = raw_payload.decode("utf-8")

    function_error: Optional[str] = response.get("FunctionError")
    return {
        "StatusCode": response["StatusCode"],
        "FunctionError": function_error,
        "Payload": raw_payload,
    }
