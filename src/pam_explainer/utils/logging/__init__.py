"""Logging setup for pam-explainer."""

from pam_explainer.utils.logging.logger_setup import LOG_FORMAT, setup_logging

__all__ = ["LOG_FORMAT", "setup_logging"]
