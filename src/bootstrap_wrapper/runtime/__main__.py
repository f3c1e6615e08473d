"""
Custom runtime entry point.

Deployed as the package's `bootstrap` executable:

    #!/bin/sh
    exec python3 -m bootstrap_wrapper.runtime

The function's handler setting (_HANDLER) picks the reference function.
Only the names in FUNCTIONS are served. The harness scenario matrix
(PingAsync, ToUpperAsync, ...) targets the reference .NET test artifact,
not these functions; a package built from this runtime fails those
entry points at init.
"""

import os
import sys

from bootstrap_wrapper import constants as CONSTANTS
from bootstrap_wrapper.logger import configure_logger, logger
from .bootstrap import report_init_error
from .functions import EchoFunction, UpperCaseFunction

FUNCTIONS = {
    "Echo": EchoFunction,
    "UpperCase": UpperCaseFunction,
}


def main() -> int:
    configure_logger(os.environ.get("LOG_LEVEL", "INFO"))
    handler_name = os.environ.get(CONSTANTS.RUNTIME_HANDLER_ENV_VAR, "Echo")

    function_class = FUNCTIONS.get(handler_name)
    if function_class is None:
        error = ValueError(
            f"Unknown handler '{handler_name}'. Available: {sorted(FUNCTIONS)}"
        )
        logger.error(str(error))
        report_init_error(error)
        return 1

    try:
        function = function_class()
    except Exception as e:
        logger.error(f"Could not initialize handler '{handler_name}': {e}")
        report_init_error(e)
        return 1

    logger.info(f"Starting {function_class.__name__} for handler '{handler_name}'")
    function.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
