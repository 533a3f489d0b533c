"""Logging and metrics for kuberender."""

from kuberender.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
