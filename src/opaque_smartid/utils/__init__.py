"""Utility helpers for opaque-smartid."""
