"""pytest fixtures for SDK test suites.

Enable with ``pytest_plugins = ["realm_testkit.pytest_plugin"]`` and
override the ``sync_backend`` fixture with the SDK under test.
"""

from __future__ import annotations

import asyncio
import re

import pytest

from realm_testkit.assertions.base import capture_failures
from realm_testkit.config import ControllerConfig
from realm_testkit.controller import RemoteController
from realm_testkit.verbose import release_logger, setup_logger


@pytest.fixture(autouse=True)
def reported_failures():
    """Failure messages reported by the assertion helpers during the test."""
    with capture_failures() as messages:
        yield messages


@pytest.fixture(scope="session")
def sync_backend():
    pytest.fail(
        "Override the 'sync_backend' fixture to provide the SDK's sync API.",
        pytrace=False,
    )


@pytest.fixture(scope="session")
def controller_config() -> ControllerConfig:
    return ControllerConfig()


@pytest.fixture
def sync_runner():
    """The event loop the controller's sessions live on.

    Drive controller coroutines with ``sync_runner.run(...)`` so that every
    realm opened during the test shares one loop.
    """
    with asyncio.Runner() as runner:
        yield runner


@pytest.fixture
def controller_logger(request, tmp_path):
    """A per-test debug logger writing to ``tmp_path / "controller-debug.log"``."""
    # note: logger name must be unique per test to avoid handler collision
    name = "realm_testkit_" + re.sub(r"\W+", "_", request.node.nodeid)
    logger = setup_logger(tmp_path / "controller-debug.log", logger_name=name)
    yield logger
    release_logger(logger)


@pytest.fixture
def remote_controller(sync_backend, controller_config, controller_logger, sync_runner):
    """A started RemoteController, shut down after the test."""
    controller = RemoteController(
        sync_backend, controller_config, logger=controller_logger
    )
    sync_runner.run(controller.start())
    yield controller
    sync_runner.run(controller.shutdown())
