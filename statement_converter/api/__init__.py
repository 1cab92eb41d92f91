"""Conversion API."""
