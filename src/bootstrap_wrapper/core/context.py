"""
Harness configuration and run context.

Design Pattern: Dependency Injection
    - Configuration is loaded into HarnessConfig at startup
    - HarnessContext wraps config + the initialized provider + run state
    - Context is passed explicitly to provisioning, scenarios and cleanup
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from .. import constants as CONSTANTS

if TYPE_CHECKING:
    from ..providers.aws.provider import AWSProvider


@dataclass
class HarnessConfig:
    """
    Parsed harness configuration.

    Every field has a default, so an empty config file (or none at all)
    reproduces the standard test setup.

    Attributes:
        region: AWS region all clients are created in
        function_name: Name of the Lambda function under test
        role_name: Name of the IAM execution role
        bucket_prefix: Prefix shared by every bucket this harness creates
        deployment_zip_key: S3 key of the deployment package
        deployment_package_path: Local path of the deployment package ZIP
        memory_size: Function memory size in MB
        runtime: Lambda runtime identifier
        initial_handler: Handler configured when the function is created
        role_propagation_timeout_seconds: Window for retrying function creation
        role_propagation_retry_delay_seconds: Delay between creation attempts
        mode: Logging mode ("DEBUG" or "INFO")
    """

    region: str = CONSTANTS.DEFAULT_REGION
    function_name: str = CONSTANTS.FUNCTION_NAME
    role_name: str = CONSTANTS.EXECUTION_ROLE_NAME
    bucket_prefix: str = CONSTANTS.TEST_BUCKET_ROOT
    deployment_zip_key: str = CONSTANTS.DEPLOYMENT_ZIP_KEY
    deployment_package_path: Optional[Path] = None
    memory_size: int = CONSTANTS.FUNCTION_MEMORY_SIZE
    runtime: str = CONSTANTS.FUNCTION_RUNTIME
    initial_handler: str = CONSTANTS.FUNCTION_INITIAL_HANDLER
    role_propagation_timeout_seconds: float = CONSTANTS.ROLE_PROPAGATION_TIMEOUT_SECONDS
    role_propagation_retry_delay_seconds: float = CONSTANTS.ROLE_PROPAGATION_RETRY_DELAY_SECONDS
    mode: str = "INFO"


@dataclass
class HarnessContext:
    """
    Encapsulates all state needed for one harness run.

    Lifecycle:
        1. Created at the start of a run with a generated bucket name
        2. Provider is initialized with credentials
        3. prepare() fills in role_arn and role_already_existed
        4. Passed to every scenario and finally to cleanup()

    Attributes:
        config: Parsed HarnessConfig
        provider: Initialized AWSProvider
        bucket_name: Unique bucket name for this run
        role_arn: Resolved execution role ARN (after prepare)
        role_already_existed: None until the role lookup completes
    """

    config: HarnessConfig
    provider: 'AWSProvider'
    bucket_name: str = ""
    role_arn: Optional[str] = None
    role_already_existed: Optional[bool] = None

    def __post_init__(self):
        if not self.bucket_name:
            self.bucket_name = self.provider.naming.deployment_bucket()
