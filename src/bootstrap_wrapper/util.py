import os
from pathlib import Path
from typing import Optional

from . import constants as CONSTANTS
from .core.exceptions import ConfigurationError


def find_up(path: str, file_or_directory_name: str, combine: bool = True) -> Optional[str]:
    """Search path and its parents for a file or directory.

    Args:
        path: Directory to start from
        file_or_directory_name: Name to look for
        combine: Return the full path to the match instead of the directory containing it

    Returns:
        The matching path, or None when the filesystem root is reached
    """
    current = os.path.abspath(path)
    while True:
        full_path = os.path.join(current, file_or_directory_name)
        if os.path.exists(full_path):
            return full_path if combine else current

        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def resolve_deployment_package(configured_path: Optional[Path], start_dir: Optional[str] = None) -> Path:
    """Locate the deployment package ZIP.

    An explicitly configured path wins. Otherwise the nearest ``dist`` directory
    above start_dir (default: current working directory) is searched for the
    package file.

    Raises:
        ConfigurationError: If no package file exists
    """
    if configured_path:
        package_path = Path(configured_path)
    else:
        dist_dir = find_up(start_dir or os.getcwd(), CONSTANTS.DEPLOYMENT_PACKAGE_DIR_NAME)
        if dist_dir is None:
            raise ConfigurationError(
                f"Could not find a '{CONSTANTS.DEPLOYMENT_PACKAGE_DIR_NAME}' directory "
                f"containing {CONSTANTS.DEPLOYMENT_PACKAGE_FILE_NAME}. "
                f"Build the package or set deployment_package_path."
            )
        package_path = Path(dist_dir) / CONSTANTS.DEPLOYMENT_PACKAGE_FILE_NAME

    if not package_path.is_file():
        raise ConfigurationError(f"Deployment package not found: {package_path}")
    return package_path
