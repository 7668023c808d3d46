"""Shared fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() after each test.

    CLI runs install a handler bound to CliRunner's streams, which are closed
    once the invocation returns. Propagation is restored so caplog sees records.
    """
    yield
    logger = logging.getLogger("pam_explainer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def no_config_file(tmp_path, monkeypatch):
    """Point the default config location at a file that does not exist."""
    path = tmp_path / "config" / "pam_explainer_config.json"
    monkeypatch.setattr("pam_explainer.config.get_config_path", lambda: path)
    return path
