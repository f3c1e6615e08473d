"""
Lambda Runtime API bootstrap.

A thin client for the custom runtime invocation protocol:

    GET  /2018-06-01/runtime/invocation/next
    POST /2018-06-01/runtime/invocation/{request_id}/response
    POST /2018-06-01/runtime/invocation/{request_id}/error
    POST /2018-06-01/runtime/init/error

HandlerWrapper binds a two-argument handler to a serializer. LambdaBootstrap
polls for invocations, runs the wrapper, and posts the result or the error
document back. Both are context managers and release their resources on exit.
"""

import logging
import os
import time
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from bootstrap_wrapper import constants as CONSTANTS
from .serializer import JsonSerializer

logger = logging.getLogger(__name__)

Handler = Callable[[Any, "LambdaContext"], Any]


@dataclass
class LambdaContext:
    """Invocation metadata passed to the handler as its second argument."""

    aws_request_id: str
    deadline_ms: int
    invoked_function_arn: str = ""
    trace_id: Optional[str] = None
    client_context: Optional[str] = None
    identity: Optional[str] = None
    function_name: Optional[str] = field(
        default_factory=lambda: os.environ.get("AWS_LAMBDA_FUNCTION_NAME"))
    function_version: Optional[str] = field(
        default_factory=lambda: os.environ.get("AWS_LAMBDA_FUNCTION_VERSION"))
    memory_limit_in_mb: Optional[int] = field(
        default_factory=lambda: int(os.environ["AWS_LAMBDA_FUNCTION_MEMORY_SIZE"])
        if os.environ.get("AWS_LAMBDA_FUNCTION_MEMORY_SIZE") else None)
    log_group_name: Optional[str] = field(
        default_factory=lambda: os.environ.get("AWS_LAMBDA_LOG_GROUP_NAME"))
    log_stream_name: Optional[str] = field(
        default_factory=lambda: os.environ.get("AWS_LAMBDA_LOG_STREAM_NAME"))

    @classmethod
    def from_headers(cls, headers: Dict[str, str]) -> "LambdaContext":
        return cls(
            aws_request_id=headers["Lambda-Runtime-Aws-Request-Id"],
            deadline_ms=int(headers.get("Lambda-Runtime-Deadline-Ms", 0)),
            invoked_function_arn=headers.get("Lambda-Runtime-Invoked-Function-Arn", ""),
            trace_id=headers.get("Lambda-Runtime-Trace-Id"),
            client_context=headers.get("Lambda-Runtime-Client-Context"),
            identity=headers.get("Lambda-Runtime-Cognito-Identity"),
        )

    def get_remaining_time_in_millis(self) -> int:
        return max(self.deadline_ms - int(time.time() * 1000), 0)


def build_error_document(error: BaseException) -> Dict[str, Any]:
    """Error body in the shape Lambda reports back to the caller."""
    return {
        "errorType": type(error).__name__,
        "errorMessage": str(error),
        "stackTrace": traceback.format_tb(error.__traceback__),
    }


def _runtime_url(runtime_api: str, path: str) -> str:
    return f"http://{runtime_api}/{CONSTANTS.RUNTIME_API_VERSION}/runtime/{path}"


def _require_runtime_api(runtime_api: Optional[str]) -> str:
    runtime_api = runtime_api or os.environ.get(CONSTANTS.RUNTIME_API_ENV_VAR)
    if not runtime_api:
        raise RuntimeError(
            f"{CONSTANTS.RUNTIME_API_ENV_VAR} is not set; "
            f"not running inside a Lambda custom runtime."
        )
    return runtime_api


def report_init_error(
    error: BaseException,
    runtime_api: Optional[str] = None,
    session: Optional[requests.Session] = None
) -> None:
    """Tell Lambda that the runtime failed before it could serve invocations."""
    url = _runtime_url(_require_runtime_api(runtime_api), "init/error")
    document = build_error_document(error)
    poster = session or requests
    response = poster.post(
        url,
        json=document,
        headers={"Lambda-Runtime-Function-Error-Type": f"Runtime.{document['errorType']}"}
    )
    response.raise_for_status()


class HandlerWrapper:
    """
    Binds a handler to a serializer.

    invoke() takes the raw request body and returns the raw response body.
    Handler exceptions are not caught here.
    """

    def __init__(self, handler: Handler, serializer: Optional[JsonSerializer] = None):
        self._handler: Optional[Handler] = handler
        self.serializer = serializer or JsonSerializer()

    def invoke(self, event: bytes, context: LambdaContext) -> bytes:
        if self._handler is None:
            raise RuntimeError("HandlerWrapper is closed")
        request = self.serializer.deserialize(event)
        result = self._handler(request, context)
        return self.serializer.serialize(result)

    def close(self) -> None:
        self._handler = None

    def __enter__(self) -> "HandlerWrapper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class LambdaBootstrap:
    """
    Runs the poll/invoke/respond loop for one HandlerWrapper.

    The loop ends when stop() is called, when max_invocations is reached, or
    when the Runtime API cannot be reached (the transport error propagates).
    """

    def __init__(
        self,
        handler_wrapper: HandlerWrapper,
        runtime_api: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        self._handler_wrapper = handler_wrapper
        self._runtime_api = _require_runtime_api(runtime_api)
        self._session = session or requests.Session()
        self._stopped = False
        self._closed = False

    def run(self, max_invocations: Optional[int] = None) -> int:
        """Serve invocations until stopped.

        Args:
            max_invocations: Stop after this many invocations (None: run forever)

        Returns:
            Number of invocations served
        """
        served = 0
        logger.info(f"Lambda bootstrap polling {self._runtime_api}")
        while not self._stopped and (max_invocations is None or served < max_invocations):
            self.invoke_once()
            served += 1
        return served

    def invoke_once(self) -> None:
        """Fetch the next invocation, run the handler, and post the outcome."""
        response = self._session.get(_runtime_url(self._runtime_api, "invocation/next"))
        response.raise_for_status()

        context = LambdaContext.from_headers(response.headers)
        if context.trace_id:
            os.environ["_X_AMZN_TRACE_ID"] = context.trace_id

        try:
            body = self._handler_wrapper.invoke(response.content, context)
        except Exception as e:
            logger.error(f"Invocation {context.aws_request_id} failed: {type(e).__name__}: {e}")
            self._post_error(context.aws_request_id, e)
            return

        result = self._session.post(
            _runtime_url(self._runtime_api, f"invocation/{context.aws_request_id}/response"),
            data=body,
            headers={"Content-Type": self._handler_wrapper.serializer.content_type}
        )
        result.raise_for_status()

    def _post_error(self, request_id: str, error: Exception) -> None:
        document = build_error_document(error)
        result = self._session.post(
            _runtime_url(self._runtime_api, f"invocation/{request_id}/error"),
            json=document,
            headers={"Lambda-Runtime-Function-Error-Type": document["errorType"]}
        )
        result.raise_for_status()

    def stop(self) -> None:
        """Finish the current invocation and leave the loop."""
        self._stopped = True

    def close(self) -> None:
        if not self._closed:
            self._session.close()
            self._closed = True

    def __enter__(self) -> "LambdaBootstrap":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
