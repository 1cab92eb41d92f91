"""Service health monitoring."""
