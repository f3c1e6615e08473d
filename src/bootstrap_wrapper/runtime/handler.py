"""
Handler adapter and runtime lifecycle.

Subclass LambdaBootstrapWrapper and implement custom_handler(input) to run a
string-in/string-out function as a Lambda custom runtime:

    class ShoutFunction(LambdaBootstrapWrapper):
        def custom_handler(self, input):
            return input.upper()

    ShoutFunction().run()      # blocks, serving invocations
    ShoutFunction().start()    # same, on a background thread
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from .bootstrap import HandlerWrapper, LambdaBootstrap
from .serializer import JsonSerializer

logger = logging.getLogger(__name__)


class LambdaBootstrapWrapper(ABC):
    """
    Adapts custom_handler(input) to the (input, context) handler signature
    and owns the bootstrap loop that serves it.

    Attributes:
        HANDLER_NAME: Name the wrapped handler is registered under
        handler_instance: The one-argument handler (custom_handler)
    """

    HANDLER_NAME = "Handler"

    def __init__(self, runtime_api: Optional[str] = None):
        self.handler_instance = self.custom_handler
        self._runtime_api = runtime_api

    def start(self) -> threading.Thread:
        """Run the bootstrap loop on a daemon thread and return at once.

        Failures in the background loop are logged, never raised to the caller.
        """
        thread = threading.Thread(
            target=self._run_in_background,
            name=f"{type(self).__name__}-bootstrap",
            daemon=True
        )
        thread.start()
        return thread

    def _run_in_background(self) -> None:
        try:
            self.run()
        except Exception:
            logger.exception("Lambda bootstrap stopped with an error")

    def run(self, max_invocations: Optional[int] = None) -> None:
        """Serve invocations until the loop terminates.

        The handler wrapper and the bootstrap are both released on every
        exit path, in reverse order of construction.
        """
        with HandlerWrapper(self.base_handler, JsonSerializer()) as handler_wrapper:
            with LambdaBootstrap(handler_wrapper, runtime_api=self._runtime_api) as bootstrap:
                bootstrap.run(max_invocations=max_invocations)

    def base_handler(self, input: Optional[str], context: Any) -> Optional[str]:
        """Two-argument form called by the bootstrap; the context is ignored."""
        return self.custom_handler(input)

    @abstractmethod
    def custom_handler(self, input: Optional[str]) -> Optional[str]:
        """Transform the request string into the response string."""
