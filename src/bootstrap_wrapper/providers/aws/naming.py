"""
AWS resource naming conventions for the harness.

Naming Convention:
    The role and function use fixed names so that reruns find and replace
    resources left behind by earlier runs. Buckets get a fixed prefix plus a
    random suffix; the prefix is what cleanup uses to sweep orphans.

    Examples:
        - runtimesupporttestingrole (IAM role)
        - CustomRuntimeFunctionTest (Lambda function)
        - runtimesupporttesting-6f1c...e2 (S3 bucket)
"""

import uuid

from bootstrap_wrapper.core.context import HarnessConfig


class HarnessNaming:
    """
    Generates and recognises resource names for the harness.

    Attributes:
        config: HarnessConfig holding the fixed names and bucket prefix
    """

    def __init__(self, config: HarnessConfig):
        self._config = config

    def execution_iam_role(self) -> str:
        """IAM role name for the function under test."""
        return self._config.role_name

    def lambda_function(self) -> str:
        """Name of the function under test."""
        return self._config.function_name

    def deployment_zip_key(self) -> str:
        """S3 key of the deployment package."""
        return self._config.deployment_zip_key

    def deployment_bucket(self) -> str:
        """A new, unique deployment bucket name."""
        return f"{self._config.bucket_prefix}{uuid.uuid4()}"

    def is_harness_bucket(self, bucket_name: str) -> bool:
        """True if bucket_name was created by this harness (this run or an earlier one)."""
        return bucket_name.startswith(self._config.bucket_prefix)
