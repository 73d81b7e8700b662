"""Debug loggers are per run: separate files, no shared handlers."""

import logging

import pytest

from realm_testkit.verbose import release_logger, setup_logger


def test_each_run_logs_to_its_own_file(tmp_path):
    first = setup_logger(tmp_path / "run1.log", logger_name="realm_testkit_run1")
    second = setup_logger(tmp_path / "run2.log", logger_name="realm_testkit_run2")

    first.info("DELETE run-1/people")
    second.info("DELETE run-2/people")

    run1 = (tmp_path / "run1.log").read_text()
    run2 = (tmp_path / "run2.log").read_text()
    assert "run-1/people" in run1 and "run-2/people" not in run1
    assert "run-2/people" in run2 and "run-1/people" not in run2
    assert "INFO realm_testkit_run1:" in run1


def test_reusing_a_configured_name_is_refused(tmp_path):
    setup_logger(tmp_path / "a.log", logger_name="realm_testkit_reused")
    with pytest.raises(RuntimeError, match="realm_testkit_reused.*already exists"):
        setup_logger(tmp_path / "b.log", logger_name="realm_testkit_reused")


def test_release_allows_reuse_and_closes_file(tmp_path):
    logger = setup_logger(tmp_path / "a.log", logger_name="realm_testkit_released")
    (handler,) = logger.handlers
    release_logger(logger)
    assert logger.handlers == []
    assert handler.stream is None

    again = setup_logger(tmp_path / "b.log", logger_name="realm_testkit_released")
    assert again is logger


def test_verbose_without_file_logs_to_stderr_only(tmp_path):
    logger = setup_logger(None, verbose=True, logger_name="realm_testkit_stderr")
    (handler,) = logger.handlers
    assert type(handler) is logging.StreamHandler
    assert logger.level == logging.DEBUG
    assert list(tmp_path.iterdir()) == []


def test_debug_file_directory_is_created(tmp_path):
    debug_file = tmp_path / "logs" / "nightly" / "debug.log"
    logger = setup_logger(debug_file, logger_name="realm_testkit_nested")
    logger.debug("opened admin realm")
    assert "opened admin realm" in debug_file.read_text()
