"""Shared utilities."""

from taskvantage.utils.logging import get_logger, mask_email, setup_logging
from taskvantage.utils.metrics import Metrics, get_metrics

__all__ = [
    "get_logger",
    "mask_email",
    "setup_logging",
    "Metrics",
    "get_metrics",
]
