"""Utility modules for the wellness reminder scheduler."""

from .log_sanitizer import sanitize_log, mask_topic, mask_url

__all__ = ["sanitize_log", "mask_topic", "mask_url"]
