"""Health check module for the statement conversion service."""

import importlib
import os
import platform
import sys
import time
from datetime import datetime
from typing import Any, Callable, Dict

import psutil
import redis

from statement_converter import __version__
from statement_converter.config.settings import Settings
from statement_converter.utils.logger import get_logger


REQUIRED_DEPENDENCIES = ("pdfplumber", "PyPDF2", "pandas", "openpyxl", "celery", "redis", "psutil")


class HealthChecker:
    """Health checker for monitoring system components."""

    def __init__(self, settings: Settings):
        """Initialize health checker with settings."""
        self.settings = settings
        self.logger = get_logger(self.__class__.__name__)

        self.components: Dict[str, Callable[[], Dict[str, Any]]] = {
            'system': self._check_system_health,
            'disk_space': self._check_disk_space,
            'memory': self._check_memory_usage,
            'dependencies': self._check_dependencies,
            'output_dir': self._check_output_dir,
        }
        if settings.history_backend == 'redis':
            self.components['redis'] = self._check_redis_health

    def run_health_check(self) -> Dict[str, Any]:
        """Run every component check and summarize the result.

        Returns:
            Dictionary with ``status`` (healthy, degraded or unhealthy),
            ``timestamp``, ``version``, ``components``, ``alerts`` and
            ``check_duration``.
        """
        start_time = time.time()
        health_data = {
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'version': __version__,
            'components': {},
            'alerts': [],
        }

        component_issues = []

        for component_name, check_func in self.components.items():
            try:
                result = check_func()
            except Exception as e:
                self.logger.error(f"Health check failed for {component_name}: {e}")
                result = self._result('error', message=str(e))

            health_data['components'][component_name] = result
            if result['status'] != 'healthy':
                component_issues.append(component_name)
                health_data['alerts'].append(
                    f"Component {component_name}: {result.get('message', 'Unknown issue')}"
                )

        if component_issues:
            if len(component_issues) > len(self.components) // 2:
                health_data['status'] = 'unhealthy'
            else:
                health_data['status'] = 'degraded'

        health_data['check_duration'] = round(time.time() - start_time, 3)
        return health_data

    @staticmethod
    def _result(status: str, **extra: Any) -> Dict[str, Any]:
        result = {'status': status, 'timestamp': datetime.now().isoformat()}
        result.update(extra)
        return result

    @staticmethod
    def _threshold_status(used_percent: float) -> str:
        if used_percent > 90:
            return 'unhealthy'
        if used_percent > 80:
            return 'degraded'
        return 'healthy'

    def _check_system_health(self) -> Dict[str, Any]:
        return self._result('healthy', info={
            'platform': platform.platform(),
            'python_version': sys.version,
            'pid': os.getpid(),
        })

    def _check_disk_space(self) -> Dict[str, Any]:
        disk_usage = psutil.disk_usage('/')
        used_percent = (disk_usage.used / disk_usage.total) * 100
        status = self._threshold_status(used_percent)

        return self._result(
            status,
            message=f"Disk usage at {used_percent:.1f}%",
            info={
                'total_gb': round(disk_usage.total / (1024**3), 2),
                'free_gb': round(disk_usage.free / (1024**3), 2),
                'used_percent': round(used_percent, 2),
            },
        )

    def _check_memory_usage(self) -> Dict[str, Any]:
        memory = psutil.virtual_memory()
        status = self._threshold_status(memory.percent)

        return self._result(
            status,
            message=f"Memory usage at {memory.percent:.1f}%",
            info={
                'total_gb': round(memory.total / (1024**3), 2),
                'available_gb': round(memory.available / (1024**3), 2),
                'used_percent': round(memory.percent, 2),
            },
        )

    def _check_dependencies(self) -> Dict[str, Any]:
        missing_deps = []
        version_info = {}

        for package in REQUIRED_DEPENDENCIES:
            try:
                module = importlib.import_module(package)
                version_info[package] = getattr(module, '__version__', 'unknown')
            except ImportError:
                missing_deps.append(package)

        status = 'unhealthy' if missing_deps else 'healthy'
        return self._result(
            status,
            message=f"Missing dependencies: {', '.join(missing_deps)}" if missing_deps else None,
            info={'versions': version_info, 'missing': missing_deps},
        )

    def _check_output_dir(self) -> Dict[str, Any]:
        path = self.settings.output_dir
        if not os.path.isdir(path):
            return self._result('degraded', message=f"{path}: does not exist")
        if not os.access(path, os.W_OK):
            return self._result('unhealthy', message=f"{path}: not writable")
        return self._result('healthy', info={'path': path})

    def _check_redis_health(self) -> Dict[str, Any]:
        try:
            client = redis.Redis.from_url(
                self.settings.redis_url,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            info = client.info()
        except redis.ConnectionError:
            return self._result('unhealthy', message='Cannot connect to Redis')

        return self._result('healthy', info={
            'version': info.get('redis_version'),
            'connected_clients': info.get('connected_clients'),
            'used_memory': info.get('used_memory_human'),
        })
