"""Pytest configuration and fixtures."""

import json
import logging

import pytest

from realm_testkit.config import ControllerConfig
from tests.fakes import FakeBackend

pytest_plugins = ["pytester", "realm_testkit.pytest_plugin"]


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up realm_testkit loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("realm_testkit_")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def sync_backend(fake_backend):
    return fake_backend


@pytest.fixture
def controller_config(admin_key_file) -> ControllerConfig:
    return ControllerConfig(admin_key_file=str(admin_key_file), upload_settle_delay=0.0)


@pytest.fixture
def admin_key_file(tmp_path):
    path = tmp_path / "keys" / "admin.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"ADMIN_TOKEN": "secret-token"}))
    return path
