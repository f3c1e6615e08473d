"""
bootstrap-wrapper: run a string-in/string-out handler as an AWS Lambda
custom runtime, and validate the result against a live deployment.

Subpackages:
    runtime    - Handler adapter, JSON serializer and Runtime API bootstrap loop
    providers  - AWS clients, provisioning and cleanup of test resources
    core       - Configuration, run context, errors, retry
"""

__version__ = "0.1.0"
