"""
Tests for scenario verification and execution.
"""

import json

import pytest

from bootstrap_wrapper.core.exceptions import ScenarioAssertionError
from bootstrap_wrapper.scenarios import (
    DEFAULT_SCENARIOS,
    ErrorOutcome,
    InvocationResult,
    SuccessOutcome,
    run_scenario,
    run_scenarios,
    verify_result,
)


def _success(response, status_code=200):
    return InvocationResult(status_code=status_code, function_error=None, payload=json.dumps(response))


def _error(error_type, error_message, function_error="Unhandled"):
    payload = json.dumps({"errorType": error_type, "errorMessage": error_message, "stackTrace": []})
    return InvocationResult(status_code=200, function_error=function_error, payload=payload)


class TestVerifySuccess:

    def test_exact_match_passes(self):
        verify_result("PingAsync", _success("PingAsync-pong"), SuccessOutcome("PingAsync-pong"))

    def test_one_character_difference_fails(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("PingAsync", _success("PingAsync-ponG"), SuccessOutcome("PingAsync-pong"))

        assert exc_info.value.field == "response"
        assert exc_info.value.expected == "PingAsync-pong"
        assert exc_info.value.actual == "PingAsync-ponG"

    def test_case_and_whitespace_are_significant(self):
        with pytest.raises(ScenarioAssertionError):
            verify_result("PingAsync", _success("PingAsync-pong "), SuccessOutcome("PingAsync-pong"))

    def test_non_200_status_fails(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("PingAsync", _success("PingAsync-pong", status_code=500),
                          SuccessOutcome("PingAsync-pong"))

        assert exc_info.value.field == "StatusCode"

    def test_function_error_fails_success_scenario(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("PingAsync", _error("Exception", "boom"), SuccessOutcome("PingAsync-pong"))

        assert exc_info.value.field == "FunctionError"

    def test_non_string_payload_fails(self):
        result = InvocationResult(status_code=200, function_error=None, payload='{"a": 1}')

        with pytest.raises(ScenarioAssertionError):
            verify_result("PingAsync", result, SuccessOutcome("PingAsync-pong"))

    def test_undecodable_payload_fails(self):
        result = InvocationResult(status_code=200, function_error=None, payload="PingAsync-pong")

        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("PingAsync", result, SuccessOutcome("PingAsync-pong"))

        assert exc_info.value.field == "Payload"


class TestVerifyError:

    def test_exact_match_passes(self):
        verify_result(
            "AggregateExceptionUnwrapped",
            _error("Exception", "Exception thrown from a synchronous handler."),
            ErrorOutcome("Exception", "Exception thrown from a synchronous handler."),
        )

    def test_error_type_mismatch_fails(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result(
                "AggregateExceptionNotUnwrapped",
                _error("Exception", "AggregateException thrown from a synchronous handler."),
                ErrorOutcome("AggregateException", "AggregateException thrown from a synchronous handler."),
            )

        assert exc_info.value.field == "errorType"

    def test_error_message_mismatch_fails(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result(
                "AggregateExceptionUnwrapped",
                _error("Exception", "Exception thrown from a synchronous handler"),
                ErrorOutcome("Exception", "Exception thrown from a synchronous handler."),
            )

        assert exc_info.value.field == "errorMessage"

    def test_success_where_error_expected_fails(self):
        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("AggregateExceptionUnwrapped", _success("ok"), ErrorOutcome("Exception", "x"))

        assert exc_info.value.field == "FunctionError"

    def test_error_payload_must_be_object(self):
        result = InvocationResult(status_code=200, function_error="Unhandled", payload='"oops"')

        with pytest.raises(ScenarioAssertionError) as exc_info:
            verify_result("AggregateExceptionUnwrapped", result, ErrorOutcome("Exception", "x"))

        assert exc_info.value.field == "Payload"


class TestDefaultScenarios:

    def test_matrix_order_and_size(self):
        entry_points = [s.entry_point for s in DEFAULT_SCENARIOS]

        assert len(entry_points) == 15
        assert entry_points[0] == "ToUpperAsync"
        assert entry_points[-1] == "GetTimezoneNameAsync"
        assert len(set(entry_points)) == 15

    def test_ping_and_upper_inputs(self):
        by_name = {s.entry_point: s for s in DEFAULT_SCENARIOS}

        assert by_name["ToUpperAsync"].input_value == "message"
        assert by_name["ToUpperAsync"].expected == SuccessOutcome("ToUpperAsync-MESSAGE")
        assert by_name["PingAsync"].input_value == "ping"

    def test_oversized_response_expectation(self):
        by_name = {s.entry_point: s for s in DEFAULT_SCENARIOS}

        expected = by_name["TooLargeResponseBodyAsync"].expected
        assert isinstance(expected, ErrorOutcome)
        assert expected.error_type == "Function.ResponseSizeTooLarge"
        assert "6291556 bytes" in expected.error_message

    def test_error_scenarios_count(self):
        errors = [s for s in DEFAULT_SCENARIOS if isinstance(s.expected, ErrorOutcome)]

        assert len(errors) == 5


class TestRunScenario:

    def test_reconfigures_then_invokes(self, mock_context, mock_lambda_client, make_invoke_response):
        mock_lambda_client.invoke.return_value = make_invoke_response("PingAsync-pong")

        result = run_scenario(mock_context, "PingAsync", "ping", SuccessOutcome("PingAsync-pong"))

        mock_lambda_client.update_function_configuration.assert_called_once_with(
            FunctionName="CustomRuntimeFunctionTest", Handler="PingAsync"
        )
        mock_lambda_client.get_waiter.assert_called_with("function_updated")
        invoke_kwargs = mock_lambda_client.invoke.call_args.kwargs
        assert invoke_kwargs["InvocationType"] == "RequestResponse"
        assert invoke_kwargs["Payload"] == '"ping"'
        assert result.decode_success() == "PingAsync-pong"

    def test_error_scenario(self, mock_context, mock_lambda_client, make_invoke_response):
        mock_lambda_client.invoke.return_value = make_invoke_response(
            {"errorType": "Exception", "errorMessage": "Exception thrown from an async handler."},
            function_error="Unhandled",
        )

        result = run_scenario(
            mock_context, "AggregateExceptionUnwrappedAsync", "",
            ErrorOutcome("Exception", "Exception thrown from an async handler."),
        )

        assert result.is_function_error

    def test_run_scenarios_stops_at_first_failure(self, mock_context, mock_lambda_client,
                                                  make_invoke_response):
        mock_lambda_client.invoke.side_effect = [
            make_invoke_response("ToUpperAsync-MESSAGE"),
            make_invoke_response("wrong"),
            make_invoke_response("never requested"),
        ]

        with pytest.raises(ScenarioAssertionError) as exc_info:
            run_scenarios(mock_context, DEFAULT_SCENARIOS[:3])

        assert exc_info.value.entry_point == "PingAsync"
        assert mock_lambda_client.invoke.call_count == 2
