"""Utility helpers."""

from hiresync.utils.extractors import find_refusal_url, safe_get

__all__ = ["find_refusal_url", "safe_get"]
