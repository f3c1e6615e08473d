"""
Custom exceptions for the custom runtime validation harness.

This module defines a hierarchy of exceptions used throughout the harness
to provide clear, actionable error messages.

Exception Hierarchy:
    HarnessError (base)
    ├── ConfigurationError - Invalid or missing configuration
    ├── ResourceCreationError - Failed to create cloud resource
    ├── ProvisioningTimeoutError - Role never became assumable in time
    ├── ScenarioAssertionError - Invocation result did not match expectation
    └── ResourceDeletionError - Failed to delete cloud resource
        └── CleanupError - Several deletions failed during one cleanup pass
"""

from typing import Any, List, Optional


class HarnessError(Exception):
    """
    Base exception for all harness-related errors.

    All custom exceptions in the harness inherit from this class,
    allowing broad exception handling when needed.

    Attributes:
        message: Human-readable error description
        resource: Optional name of the resource the error relates to
    """

    def __init__(self, message: str, resource: Optional[str] = None):
        self.message = message
        self.resource = resource

        if resource:
            full_message = f"{message} [resource={resource}]"
        else:
            full_message = message

        super().__init__(full_message)


class ConfigurationError(HarnessError):
    """
    Raised when configuration is invalid or missing required fields.

    This typically occurs when:
    - Config file has invalid JSON
    - Field value fails validation
    - The deployment package cannot be located

    Example:
        >>> load_harness_config(Path("broken.json"))
        ConfigurationError: Invalid JSON in configuration file: ... (file: broken.json)
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message)


class ResourceCreationError(HarnessError):
    """
    Raised when a cloud resource fails to create.

    This wraps SDK errors with additional context about
    what resource was being created.

    Attributes:
        resource_type: Type of resource (e.g., "lambda_function", "s3_bucket")
        resource_name: Name of the resource that failed
        original_error: The underlying SDK exception
    """

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        original_error: Optional[Exception] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.original_error = original_error

        message = f"Failed to create {resource_type} '{resource_name}'"
        if original_error:
            message += f": {str(original_error)}"

        super().__init__(message)


class ProvisioningTimeoutError(HarnessError):
    """
    Raised when a retried provisioning step does not succeed in its window.

    Lambda rejects a function whose execution role has not yet propagated
    through IAM. Creation is retried for a bounded time; when that time is
    used up this error ends the run and cleanup takes over.
    """

    def __init__(self, resource_name: str, timeout_seconds: float):
        self.resource_name = resource_name
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Timed out trying to create Lambda function {resource_name} "
            f"after {timeout_seconds}s"
        )


class ScenarioAssertionError(HarnessError):
    """
    Raised when an invocation result does not match its scenario.

    Comparisons are exact. The first mismatch aborts the remaining scenarios.

    Attributes:
        entry_point: Handler the function was configured with
        field: What was compared (e.g., "StatusCode", "errorType")
        expected: Expected value
        actual: Value observed
    """

    def __init__(self, entry_point: str, field: str, expected: Any, actual: Any):
        self.entry_point = entry_point
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Scenario '{entry_point}' failed on {field}: "
            f"expected {expected!r}, got {actual!r}"
        )


class ResourceDeletionError(HarnessError):
    """
    Raised when a cloud resource fails to delete.

    "Not found" conditions never produce this error; deletions are idempotent.

    Attributes:
        resource_type: Type of resource (e.g., "lambda_function", "s3_bucket")
        resource_name: Name of the resource that failed
        original_error: The underlying SDK exception
    """

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        original_error: Optional[Exception] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.original_error = original_error

        message = f"Failed to delete {resource_type} '{resource_name}'"
        if original_error:
            message += f": {str(original_error)}"

        super().__init__(message)


class CleanupError(ResourceDeletionError):
    """Raised after a cleanup pass in which more than one deletion failed."""

    def __init__(self, failures: List[ResourceDeletionError]):
        self.failures = failures
        HarnessError.__init__(
            self,
            f"{len(failures)} resources failed to delete: "
            + "; ".join(str(f) for f in failures)
        )
        self.resource_type = "multiple"
        self.resource_name = ", ".join(f.resource_name for f in failures)
        self.original_error = None
