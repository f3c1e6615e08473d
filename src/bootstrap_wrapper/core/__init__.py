"""
Core harness infrastructure: configuration, run context, errors and retry.
"""

from .context import HarnessConfig, HarnessContext
from .exceptions import (
    HarnessError,
    ConfigurationError,
    ResourceCreationError,
    ProvisioningTimeoutError,
    ScenarioAssertionError,
    ResourceDeletionError,
    CleanupError,
)

__all__ = [
    "HarnessConfig",
    "HarnessContext",
    "HarnessError",
    "ConfigurationError",
    "ResourceCreationError",
    "ProvisioningTimeoutError",
    "ScenarioAssertionError",
    "ResourceDeletionError",
    "CleanupError",
]
