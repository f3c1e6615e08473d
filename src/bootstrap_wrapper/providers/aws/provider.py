"""
AWS provider for the harness.

AWSProvider owns the boto3 clients and the naming helper for one run.

Usage:
    provider = AWSProvider()
    provider.initialize_clients({
        "aws_access_key_id": "...",
        "aws_secret_access_key": "...",
    }, config)

    lambda_client = provider.clients["lambda"]
    role_name = provider.naming.execution_iam_role()
"""

from typing import Dict, Any, Optional

from bootstrap_wrapper.core.context import HarnessConfig


class AWSProvider:
    """
    Manages AWS SDK clients and resource naming.

    Attributes:
        name: Always "aws" for this provider
        clients: Dictionary of initialized boto3 clients
        naming: HarnessNaming instance for resource names
    """

    name: str = "aws"

    def __init__(self):
        """Initialize AWS provider with empty state."""
        self._region: str = ""
        self._naming = None
        self._clients: Dict[str, Any] = {}
        self._initialized: bool = False

    @property
    def region(self) -> str:
        """Get the AWS region for this provider instance."""
        return self._region

    @property
    def naming(self):
        """
        Get the HarnessNaming instance for this provider.

        Raises:
            RuntimeError: If provider not initialized
        """
        if not self._naming:
            raise RuntimeError(
                "Provider not initialized. Call initialize_clients() first."
            )
        return self._naming

    @property
    def clients(self) -> Dict[str, Any]:
        """Return initialized SDK clients."""
        if not self._initialized:
            raise RuntimeError(
                "Provider not initialized. Call initialize_clients() first."
            )
        return self._clients

    def initialize_clients(
        self,
        credentials: Optional[dict],
        config: HarnessConfig,
        clients: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize boto3 clients for IAM, Lambda and S3.

        Args:
            credentials: AWS credentials dictionary (may be empty):
                - aws_access_key_id
                - aws_secret_access_key
                - aws_region: overrides config.region when present
            config: Harness configuration (names and region)
            clients: Pre-built clients to use instead of creating new ones
        """
        from .clients import create_aws_clients
        from .naming import HarnessNaming

        credentials = credentials or {}
        self._region = credentials.get("aws_region") or config.region
        self._naming = HarnessNaming(config)

        if clients is not None:
            self._clients = clients
        else:
            self._clients = create_aws_clients(
                access_key_id=credentials.get("aws_access_key_id"),
                secret_access_key=credentials.get("aws_secret_access_key"),
                region=self._region
            )

        self._initialized = True
