"""
Custom runtime support: handler adapter, JSON serializer and bootstrap loop.
"""

from .bootstrap import HandlerWrapper, LambdaBootstrap, LambdaContext
from .functions import EchoFunction, UpperCaseFunction
from .handler import LambdaBootstrapWrapper
from .serializer import JsonSerializer

__all__ = [
    "HandlerWrapper",
    "LambdaBootstrap",
    "LambdaContext",
    "LambdaBootstrapWrapper",
    "EchoFunction",
    "UpperCaseFunction",
    "JsonSerializer",
]
