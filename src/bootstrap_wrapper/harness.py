"""
Custom Runtime Validation Harness - Entry Point.

Provisions the test resources, runs the scenario matrix against the deployed
function, and always cleans up afterwards.

Usage:
    python -m bootstrap_wrapper --config config_harness.json --credentials config_credentials_aws.json
"""

import argparse
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bootstrap_wrapper import constants as CONSTANTS
from bootstrap_wrapper.core.config_loader import load_credentials, load_harness_config
from bootstrap_wrapper.core.context import HarnessConfig, HarnessContext
from bootstrap_wrapper.core.exceptions import HarnessError
from bootstrap_wrapper.logger import configure_logger, logger, print_stack_trace
from bootstrap_wrapper.providers.aws import AWSProvider
from bootstrap_wrapper.providers.aws.cleanup import cleanup
from bootstrap_wrapper.providers.aws.provisioner import prepare
from bootstrap_wrapper.scenarios import DEFAULT_SCENARIOS, InvocationResult, Scenario, run_scenarios


def create_context(config: HarnessConfig, credentials: Optional[dict] = None) -> HarnessContext:
    """Initialize the AWS provider and build a fresh run context."""
    provider = AWSProvider()
    provider.initialize_clients(credentials or {}, config)
    return HarnessContext(config=config, provider=provider)


@contextmanager
def provisioned_resources(
    context: HarnessContext,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep
) -> Iterator[HarnessContext]:
    """Provision test resources and guarantee cleanup on every exit path.

    The role is only deleted when this run is known to have created it. If
    provisioning fails before the role lookup completes, the role is kept.

    A provisioning or scenario failure is logged before cleanup starts, so it
    stays visible even when cleanup then fails and replaces it.
    """
    try:
        prepare(context, clock=clock, sleep=sleep)
        yield context
    except Exception as e:
        logger.error(f"Run failed, cleaning up: {e}")
        raise
    finally:
        cleanup(context, role_already_existed=context.role_already_existed is not False)


def run_harness(
    context: HarnessContext,
    scenarios: Optional[List[Scenario]] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep
) -> List[InvocationResult]:
    """Provision, run every scenario in order, and clean up.

    Returns:
        One InvocationResult per scenario, when all pass

    Raises:
        HarnessError: The first provisioning, scenario or cleanup failure
    """
    scenarios = DEFAULT_SCENARIOS if scenarios is None else scenarios
    with provisioned_resources(context, clock=clock, sleep=sleep):
        results = run_scenarios(context, scenarios)
    logger.info(f"All {len(results)} scenarios passed.")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Custom runtime validation harness")
    parser.add_argument("--config", type=Path, help=f"Path to {CONSTANTS.CONFIG_FILE}")
    parser.add_argument("--credentials", type=Path,
                        help=f"Path to {CONSTANTS.CONFIG_CREDENTIALS_AWS_FILE}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        config = load_harness_config(args.config)
        configure_logger("DEBUG" if args.debug else config.mode)
        context = create_context(config, load_credentials(args.credentials))
        logger.info(f"Region: {context.provider.region}")
        logger.info(f"Bucket: {context.bucket_name}")
        run_harness(context)
    except (HarnessError, ClientError, BotoCoreError) as e:
        logger.error(f"Harness failed: {e}")
        print_stack_trace()
        return 1
    return 0
