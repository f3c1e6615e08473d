import io
import json
import os
import sys
import zipfile
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

# Make the src layout importable without installing the package
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

REGION = "us-west-2"


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables to prevent accidental cloud calls."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


def client_error(code: str, message: str = "", operation: str = "Operation") -> ClientError:
    """Build a botocore ClientError with the given error code and message."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def invoke_response(payload, function_error=None, status_code=200) -> dict:
    """Shape of a lambda.invoke() response with a readable Payload stream."""
    if not isinstance(payload, bytes):
        payload = json.dumps(payload).encode("utf-8")
    response = {"StatusCode": status_code, "Payload": io.BytesIO(payload)}
    if function_error:
        response["FunctionError"] = function_error
    return response


@pytest.fixture
def deployment_package(tmp_path):
    """A small deployment ZIP on disk."""
    package_path = tmp_path / "dist" / "CustomRuntimeFunctionTest.zip"
    package_path.parent.mkdir()
    with zipfile.ZipFile(package_path, "w") as zf:
        zf.writestr("bootstrap", "#!/bin/sh\nexec python3 -m bootstrap_wrapper.runtime\n")
    return package_path


@pytest.fixture
def harness_config(deployment_package):
    from bootstrap_wrapper.core.context import HarnessConfig

    return HarnessConfig(region=REGION, deployment_package_path=deployment_package)


@pytest.fixture
def mock_lambda_client():
    """MagicMock Lambda client; moto cannot run 'provided' runtimes."""
    lambda_client = MagicMock()
    lambda_client.delete_function.side_effect = client_error(
        "ResourceNotFoundException", "Function not found", "DeleteFunction"
    )
    lambda_client.create_function.return_value = {"FunctionName": "CustomRuntimeFunctionTest"}
    return lambda_client


@pytest.fixture
def mock_provider(harness_config, mock_lambda_client):
    """
    AWSProvider backed by moto IAM/S3 clients and a MagicMock Lambda client.
    """
    from bootstrap_wrapper.providers.aws.provider import AWSProvider

    with mock_aws():
        provider = AWSProvider()
        provider.initialize_clients({}, harness_config, clients={
            "iam": boto3.client("iam", region_name=REGION),
            "s3": boto3.client("s3", region_name=REGION),
            "lambda": mock_lambda_client,
        })
        yield provider


@pytest.fixture
def mock_context(harness_config, mock_provider):
    from bootstrap_wrapper.core.context import HarnessContext

    return HarnessContext(config=harness_config, provider=mock_provider)


@pytest.fixture
def make_client_error():
    return client_error


@pytest.fixture
def make_invoke_response():
    return invoke_response
