"""
Integration tests for the full provision / run / cleanup cycle.
"""

import json
from unittest.mock import patch

import pytest

from bootstrap_wrapper import constants as CONSTANTS
from bootstrap_wrapper.core.exceptions import (
    ProvisioningTimeoutError,
    ResourceCreationError,
    ResourceDeletionError,
    ScenarioAssertionError,
)
from bootstrap_wrapper.harness import main, provisioned_resources, run_harness
from bootstrap_wrapper.scenarios import DEFAULT_SCENARIOS, ErrorOutcome


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def _expected_response(scenario, make_invoke_response):
    if isinstance(scenario.expected, ErrorOutcome):
        return make_invoke_response(
            {"errorType": scenario.expected.error_type, "errorMessage": scenario.expected.error_message},
            function_error="Unhandled",
        )
    return make_invoke_response(scenario.expected.response)


def _harness_buckets(context):
    return [
        b["Name"] for b in context.provider.clients["s3"].list_buckets()["Buckets"]
        if b["Name"].startswith("runtimesupporttesting-")
    ]


def _role_exists(context):
    iam = context.provider.clients["iam"]
    try:
        iam.get_role(RoleName="runtimesupporttestingrole")
        return True
    except iam.exceptions.NoSuchEntityException:
        return False


class TestRunHarness:
    """Tests for run_harness against the scenario matrix."""

    def test_full_matrix_passes_and_cleans_up(self, mock_context, mock_lambda_client, make_invoke_response):
        """Verify every scenario runs in order and resources are removed."""
        mock_lambda_client.invoke.side_effect = [
            _expected_response(s, make_invoke_response) for s in DEFAULT_SCENARIOS
        ]
        clock = FakeClock()

        results = run_harness(mock_context, clock=clock, sleep=clock.sleep)

        assert len(results) == len(DEFAULT_SCENARIOS)
        handlers = [c.kwargs["Handler"] for c in mock_lambda_client.update_function_configuration.call_args_list]
        assert handlers == [s.entry_point for s in DEFAULT_SCENARIOS]
        assert _harness_buckets(mock_context) == []
        assert not _role_exists(mock_context)
        # once before creation, once during cleanup
        assert mock_lambda_client.delete_function.call_count == 2

    def test_scenario_failure_still_cleans_up(self, mock_context, mock_lambda_client, make_invoke_response):
        """Verify cleanup runs when a scenario does not match."""
        mock_lambda_client.invoke.return_value = make_invoke_response("not what was expected")
        clock = FakeClock()

        with pytest.raises(ScenarioAssertionError) as exc_info:
            run_harness(mock_context, clock=clock, sleep=clock.sleep)

        assert exc_info.value.entry_point == "ToUpperAsync"
        assert _harness_buckets(mock_context) == []
        assert not _role_exists(mock_context)

    def test_provisioning_timeout_still_cleans_up(self, mock_context, mock_lambda_client, make_client_error):
        """Verify a role propagation timeout ends the run and cleanup follows."""
        mock_lambda_client.create_function.side_effect = make_client_error(
            "InvalidParameterValueException", CONSTANTS.ROLE_NOT_ASSUMABLE_MESSAGE, "CreateFunction"
        )
        clock = FakeClock()

        with pytest.raises(ProvisioningTimeoutError):
            run_harness(mock_context, clock=clock, sleep=clock.sleep)

        mock_lambda_client.invoke.assert_not_called()
        assert _harness_buckets(mock_context) == []
        assert not _role_exists(mock_context)

    def test_preexisting_role_survives_run(self, mock_context, mock_lambda_client, make_invoke_response):
        """Verify a role that existed before the run is not deleted."""
        mock_context.provider.clients["iam"].create_role(
            RoleName="runtimesupporttestingrole",
            AssumeRolePolicyDocument=CONSTANTS.LAMBDA_ASSUME_ROLE_POLICY,
        )
        mock_lambda_client.invoke.return_value = make_invoke_response("PingAsync-pong")
        clock = FakeClock()

        run_harness(mock_context, scenarios=DEFAULT_SCENARIOS[1:2], clock=clock, sleep=clock.sleep)

        assert _role_exists(mock_context)

    def test_role_kept_when_lookup_never_completed(self, mock_context, make_client_error):
        """Verify an unknown role state keeps the role."""
        iam = mock_context.provider.clients["iam"]
        iam.create_role(
            RoleName="runtimesupporttestingrole",
            AssumeRolePolicyDocument=CONSTANTS.LAMBDA_ASSUME_ROLE_POLICY,
        )

        with patch.object(iam, "get_role", side_effect=make_client_error("Throttling", "slow down")):
            with pytest.raises(ResourceCreationError):
                with provisioned_resources(mock_context):
                    pass

        assert mock_context.role_already_existed is None
        assert _role_exists(mock_context)

    def test_scenario_failure_logged_when_cleanup_fails(
        self, mock_context, mock_lambda_client, make_invoke_response, make_client_error, caplog
    ):
        """Verify a cleanup error does not hide the scenario failure that preceded it."""
        mock_lambda_client.invoke.return_value = make_invoke_response("not what was expected")
        s3 = mock_context.provider.clients["s3"]
        clock = FakeClock()

        with patch.object(s3, "delete_bucket", side_effect=make_client_error("AccessDenied", "denied")):
            with pytest.raises(ResourceDeletionError) as exc_info:
                run_harness(mock_context, clock=clock, sleep=clock.sleep)

        assert isinstance(exc_info.value.__context__, ScenarioAssertionError)
        assert "Scenario 'ToUpperAsync' failed on response" in caplog.text


class TestMain:
    """Tests for the command line entry point."""

    @patch("bootstrap_wrapper.harness.run_harness")
    def test_success_exit_code(self, mock_run, tmp_path, deployment_package):
        config_path = tmp_path / "config_harness.json"
        config_path.write_text(json.dumps({"deployment_package_path": str(deployment_package)}))

        assert main(["--config", str(config_path)]) == 0
        context = mock_run.call_args.args[0]
        assert context.config.deployment_package_path == deployment_package
        assert context.bucket_name.startswith("runtimesupporttesting-")

    @patch("bootstrap_wrapper.harness.run_harness")
    def test_harness_failure_exit_code(self, mock_run):
        mock_run.side_effect = ScenarioAssertionError("PingAsync", "response", "a", "b")

        assert main([]) == 1

    def test_invalid_config_exit_code(self, tmp_path):
        config_path = tmp_path / "config_harness.json"
        config_path.write_text("{broken")

        assert main(["--config", str(config_path)]) == 1
