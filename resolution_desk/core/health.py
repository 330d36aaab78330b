"""
Process health reporting for the desk API
"""
import logging
import os
import platform
import time

import psutil

logger = logging.getLogger(__name__)


class HealthMonitor:
    """Reports uptime and process resource usage"""

    def __init__(self):
        self.started_at = time.time()
        self.process = psutil.Process(os.getpid())

    def uptime_seconds(self):
        return int(time.time() - self.started_at)

    def get_process_info(self):
        """Get resource usage of the running API process"""
        try:
            with self.process.oneshot():
                memory = self.process.memory_info()
                return {
                    'pid': self.process.pid,
                    'memory_rss': memory.rss,
                    'memory_percent': round(self.process.memory_percent(), 2),
                    'cpu_percent': self.process.cpu_percent(interval=None),
                    'threads': self.process.num_threads(),
                }
        except psutil.Error as e:
            logger.warning('Failed to read process info: %s', e)
            return {}

    def get_system_info(self):
        return {
            'platform': platform.system(),
            'python': platform.python_version(),
            'cpu_count': psutil.cpu_count(),
        }

    def snapshot(self, components):
        return {
            'status': 'healthy',
            'uptime_seconds': self.uptime_seconds(),
            'components': sorted(components),
            'process': self.get_process_info(),
            'system': self.get_system_info(),
        }
