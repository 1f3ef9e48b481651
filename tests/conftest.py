import logging
import random

import pytest
from eth_utils import to_checksum_address
from pytest import FixtureRequest


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(scope="function")
def debug_logger(request: FixtureRequest, caplog: pytest.LogCaptureFixture):
    logger = logging.getLogger("nethermind").getChild("callkit")
    caplog.set_level(logging.DEBUG, logger="nethermind")

    logger.info("-" * 100)
    logger.info(f"\t\tInitializing New Run for Test: {request.function.__name__}")
    logger.info("-" * 100)

    return logger
