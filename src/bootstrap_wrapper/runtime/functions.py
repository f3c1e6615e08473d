"""
Reference handlers shipped with the runtime.
"""

from typing import Optional

from .handler import LambdaBootstrapWrapper


class EchoFunction(LambdaBootstrapWrapper):
    """Returns its input unchanged, including None and the empty string."""

    def custom_handler(self, input: Optional[str]) -> Optional[str]:
        return input


class UpperCaseFunction(LambdaBootstrapWrapper):
    """Returns its input in upper case."""

    def custom_handler(self, input: Optional[str]) -> Optional[str]:
        if input is None:
            return None
        return input.upper()
