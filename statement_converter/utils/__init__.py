"""Utility helpers for logging and validation."""
