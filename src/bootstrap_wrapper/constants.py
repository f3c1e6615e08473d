import json

# ==========================================
# 1. Configuration Filenames
# ==========================================
CONFIG_FILE = "config_harness.json"
CONFIG_CREDENTIALS_AWS_FILE = "config_credentials_aws.json"

REQUIRED_CREDENTIALS_FIELDS = ["aws_access_key_id", "aws_secret_access_key"]

# ==========================================
# 2. Test Resource Names
# ==========================================
DEFAULT_REGION = "us-west-2"

EXECUTION_ROLE_NAME = "runtimesupporttestingrole"
EXECUTION_ROLE_DESCRIPTION = "Test role for CustomRuntimeTests."
TEST_BUCKET_ROOT = "runtimesupporttesting-"
FUNCTION_NAME = "CustomRuntimeFunctionTest"
DEPLOYMENT_ZIP_KEY = "CustomRuntimeFunctionTest.zip"

# Searched upwards from the working directory when no package path is configured.
DEPLOYMENT_PACKAGE_DIR_NAME = "dist"
DEPLOYMENT_PACKAGE_FILE_NAME = "CustomRuntimeFunctionTest.zip"

LAMBDA_ASSUME_ROLE_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{
        "Sid": "",
        "Effect": "Allow",
        "Principal": {"Service": "lambda.amazonaws.com"},
        "Action": "sts:AssumeRole"
    }]
}, indent=2)

# ==========================================
# 3. Function Settings
# ==========================================
FUNCTION_MEMORY_SIZE = 512
FUNCTION_RUNTIME = "provided"
FUNCTION_INITIAL_HANDLER = "PingAsync"

# ==========================================
# 4. Role Propagation
# ==========================================
ROLE_PROPAGATION_TIMEOUT_SECONDS = 30
ROLE_PROPAGATION_RETRY_DELAY_SECONDS = 2
ROLE_NOT_ASSUMABLE_MESSAGE = "The role defined for the function cannot be assumed by Lambda."

# ==========================================
# 5. Lambda Runtime API
# ==========================================
RUNTIME_API_ENV_VAR = "AWS_LAMBDA_RUNTIME_API"
RUNTIME_API_VERSION = "2018-06-01"
RUNTIME_HANDLER_ENV_VAR = "_HANDLER"
