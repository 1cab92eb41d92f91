"""Tests for the health checker."""

from unittest.mock import Mock, patch

import redis

from statement_converter.config.settings import Settings
from statement_converter.monitoring.health_checker import HealthChecker


MONITORING = "statement_converter.monitoring.health_checker"


def usage(percent):
    return Mock(total=100 * 1024**3, used=percent * 1024**3, free=(100 - percent) * 1024**3,
                available=(100 - percent) * 1024**3, percent=percent)


class TestHealthChecker:
    """Test cases for HealthChecker."""

    def test_components(self, sample_settings):
        """Test that Redis is only checked for the Redis backend."""
        assert "redis" not in HealthChecker(sample_settings).components
        assert "redis" in HealthChecker(Settings(history_backend="redis")).components

    @patch(f"{MONITORING}.psutil")
    def test_healthy(self, mock_psutil, sample_settings, temp_dir):
        """Test an all-healthy report."""
        mock_psutil.disk_usage.return_value = usage(40)
        mock_psutil.virtual_memory.return_value = usage(50)
        sample_settings.output_dir = str(temp_dir)

        report = HealthChecker(sample_settings).run_health_check()

        assert report["status"] == "healthy"
        assert report["alerts"] == []
        assert set(report["components"]) == {"system", "disk_space", "memory", "dependencies", "output_dir"}
        assert "check_duration" in report

    @patch(f"{MONITORING}.psutil")
    def test_degraded(self, mock_psutil, sample_settings, temp_dir):
        """Test a report with one component under pressure."""
        mock_psutil.disk_usage.return_value = usage(85)
        mock_psutil.virtual_memory.return_value = usage(50)
        sample_settings.output_dir = str(temp_dir)

        report = HealthChecker(sample_settings).run_health_check()

        assert report["status"] == "degraded"
        assert report["components"]["disk_space"]["status"] == "degraded"
        assert len(report["alerts"]) == 1

    @patch(f"{MONITORING}.psutil")
    def test_unhealthy(self, mock_psutil, sample_settings):
        """Test a report with most components failing."""
        mock_psutil.disk_usage.side_effect = OSError("no disk")
        mock_psutil.virtual_memory.return_value = usage(95)
        sample_settings.output_dir = "/nonexistent/output/dir"

        report = HealthChecker(sample_settings).run_health_check()

        assert report["status"] == "unhealthy"
        assert report["components"]["disk_space"]["status"] == "error"

    @patch(f"{MONITORING}.redis.Redis.from_url")
    def test_redis_unreachable(self, mock_from_url):
        """Test the Redis check when the server is down."""
        mock_from_url.return_value.ping.side_effect = redis.ConnectionError("refused")

        result = HealthChecker(Settings(history_backend="redis"))._check_redis_health()
        assert result["status"] == "unhealthy"

    @patch(f"{MONITORING}.redis.Redis.from_url")
    def test_redis_reachable(self, mock_from_url):
        """Test the Redis check when the server answers."""
        mock_from_url.return_value.info.return_value = {"redis_version": "7.2.0"}

        result = HealthChecker(Settings(history_backend="redis"))._check_redis_health()

        assert result["status"] == "healthy"
        assert result["info"]["version"] == "7.2.0"
