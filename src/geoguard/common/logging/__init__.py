"""Logging helpers."""

from geoguard.common.logging.logger import MaskingFilter, get_logger

__all__ = ["MaskingFilter", "get_logger"]
