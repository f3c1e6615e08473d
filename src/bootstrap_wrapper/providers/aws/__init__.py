"""
AWS provider package.

Package Structure:
    aws/
    ├── __init__.py        # This file
    ├── provider.py        # AWSProvider class
    ├── clients.py         # boto3 client initialization
    ├── naming.py          # Resource naming conventions
    ├── lambda_manager.py  # Create/configure/invoke/delete the function under test
    ├── provisioner.py     # prepare(): role, bucket + package, function
    └── cleanup.py         # cleanup(): function, harness buckets, role
"""

from .provider import AWSProvider
from .provisioner import prepare
from .cleanup import cleanup

__all__ = ["AWSProvider", "prepare", "cleanup"]
