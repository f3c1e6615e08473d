"""
Invocation scenarios for the deployed custom runtime function.

Each scenario reconfigures the function's handler, invokes it with a JSON
payload, and compares the result exactly against an expected success string
or an expected error (errorType + errorMessage).

Scenarios share one deployed function and must run one after another.
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from bootstrap_wrapper.core.exceptions import ScenarioAssertionError
from bootstrap_wrapper.logger import logger
from bootstrap_wrapper.providers.aws import lambda_manager

if TYPE_CHECKING:
    from bootstrap_wrapper.core.context import HarnessContext


@dataclass(frozen=True)
class SuccessOutcome:
    """The handler returns normally and its decoded response equals `response`."""

    response: str


@dataclass(frozen=True)
class ErrorOutcome:
    """The handler fails with exactly this errorType and errorMessage."""

    error_type: str
    error_message: str


Outcome = Union[SuccessOutcome, ErrorOutcome]


@dataclass(frozen=True)
class Scenario:
    entry_point: str
    input_value: Any
    expected: Outcome


@dataclass
class InvocationResult:
    """
    Raw outcome of one invocation.

    Attributes:
        status_code: HTTP status of the Invoke call itself
        function_error: Set by Lambda when the handler failed (e.g. "Unhandled")
        payload: Response payload as text
    """

    status_code: int
    function_error: Optional[str]
    payload: str

    @property
    def is_function_error(self) -> bool:
        return self.function_error is not None

    def decode_success(self) -> Any:
        return json.loads(self.payload)

    def decode_error(self) -> Dict[str, Any]:
        decoded = json.loads(self.payload)
        if not isinstance(decoded, dict):
            raise ValueError(f"Error payload is not a JSON object: {self.payload!r}")
        return decoded


DEFAULT_SCENARIOS: List[Scenario] = [
    Scenario("ToUpperAsync", "message", SuccessOutcome("ToUpperAsync-MESSAGE")),
    Scenario("PingAsync", "ping", SuccessOutcome("PingAsync-pong")),
    Scenario("HttpsWorksAsync", "", SuccessOutcome("HttpsWorksAsync-SUCCESS")),
    Scenario("CertificateCallbackWorksAsync", "", SuccessOutcome("CertificateCallbackWorksAsync-SUCCESS")),
    Scenario("NetworkingProtocolsAsync", "", SuccessOutcome("NetworkingProtocolsAsync-SUCCESS")),
    Scenario("HandlerEnvVarAsync", "", SuccessOutcome("HandlerEnvVarAsync-HandlerEnvVarAsync")),
    Scenario("AggregateExceptionUnwrappedAsync", "",
             ErrorOutcome("Exception", "Exception thrown from an async handler.")),
    Scenario("AggregateExceptionUnwrapped", "",
             ErrorOutcome("Exception", "Exception thrown from a synchronous handler.")),
    Scenario("AggregateExceptionNotUnwrappedAsync", "",
             ErrorOutcome("AggregateException", "AggregateException thrown from an async handler.")),
    Scenario("AggregateExceptionNotUnwrapped", "",
             ErrorOutcome("AggregateException", "AggregateException thrown from a synchronous handler.")),
    Scenario("TooLargeResponseBodyAsync", "",
             ErrorOutcome(
                 "Function.ResponseSizeTooLarge",
                 "Response payload size (7340060 bytes) exceeded maximum allowed payload size (6291556 bytes)."
             )),
    Scenario("LambdaEnvironmentAsync", "", SuccessOutcome("LambdaEnvironmentAsync-SUCCESS")),
    Scenario("LambdaContextBasicAsync", "", SuccessOutcome("LambdaContextBasicAsync-SUCCESS")),
    Scenario("GetPidDllImportAsync", "", SuccessOutcome("GetPidDllImportAsync-SUCCESS")),
    Scenario("GetTimezoneNameAsync", "", SuccessOutcome("GetTimezoneNameAsync-UTC")),
]


def _check(entry_point: str, field: str, expected: Any, actual: Any) -> None:
    if expected != actual:
        raise ScenarioAssertionError(entry_point, field, expected, actual)


def verify_result(entry_point: str, result: InvocationResult, expected: Outcome) -> None:
    """Compare an invocation result against the expected outcome.

    Raises:
        ScenarioAssertionError: On the first mismatch
    """
    _check(entry_point, "StatusCode", 200, result.status_code)

    if isinstance(expected, SuccessOutcome):
        _check(entry_point, "FunctionError", None, result.function_error)
        try:
            response = result.decode_success()
        except ValueError as e:
            raise ScenarioAssertionError(entry_point, "Payload", expected.response, result.payload) from e
        if not isinstance(response, str):
            raise ScenarioAssertionError(entry_point, "Payload", expected.response, response)
        _check(entry_point, "response", expected.response, response)
        return

    if not result.is_function_error:
        raise ScenarioAssertionError(entry_point, "FunctionError", "<any error>", None)
    try:
        error = result.decode_error()
    except ValueError as e:
        raise ScenarioAssertionError(entry_point, "Payload", "<JSON error object>", result.payload) from e
    _check(entry_point, "errorType", expected.error_type, error.get("errorType"))
    _check(entry_point, "errorMessage", expected.error_message, error.get("errorMessage"))


def run_scenario(
    context: 'HarnessContext',
    entry_point: str,
    input_value: Any,
    expected: Outcome
) -> InvocationResult:
    """Reconfigure the handler, invoke once, and verify the result.

    Returns:
        The verified InvocationResult

    Raises:
        ScenarioAssertionError: If the result does not match
    """
    logger.info(f"Running scenario: {entry_point}")
    lambda_manager.update_handler(context, entry_point)

    raw = lambda_manager.invoke_function(context, input_value)
    result = InvocationResult(
        status_code=raw["StatusCode"],
        function_error=raw["FunctionError"],
        payload=raw["Payload"],
    )
    logger.debug(f"{entry_point} returned {result}")

    verify_result(entry_point, result, expected)
    logger.info(f"  ✓ {entry_point}")
    return result


def run_scenarios(context: 'HarnessContext', scenarios: List[Scenario]) -> List[InvocationResult]:
    """Run scenarios in order, stopping at the first failure."""
    return [
        run_scenario(context, s.entry_point, s.input_value, s.expected)
        for s in scenarios
    ]
