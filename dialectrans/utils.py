"""工具类与辅助功能。"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict


class _OperationStats:
    def __init__(self) -> None:
        self.total = 0
        self.succeeded = 0
        self.total_duration = 0.0
        self.min_duration = float("inf")
        self.max_duration = 0.0

    def record(self, duration: float, success: bool) -> None:
        self.total += 1
        if success:
            self.succeeded += 1
            self.total_duration += duration
            self.min_duration = min(self.min_duration, duration)
            self.max_duration = max(self.max_duration, duration)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total,
            "successful_requests": self.succeeded,
            "success_rate": self.succeeded / self.total if self.total else 0.0,
            "average_duration": self.total_duration / self.succeeded if self.succeeded else 0.0,
            "min_duration": 0.0 if self.min_duration == float("inf") else self.min_duration,
            "max_duration": self.max_duration,
        }


class PerformanceMetrics:
    """按操作类型（translate / speech）记录请求耗时和成功率。"""

    def __init__(self) -> None:
        self._stats: Dict[str, _OperationStats] = defaultdict(_OperationStats)
        self.start_time = time.time()

    def record_request(self, operation: str, duration: float, success: bool) -> None:
        self._stats[operation].record(duration, success)

    def get_metrics(self) -> Dict[str, Any]:
        total = sum(stats.total for stats in self._stats.values())
        succeeded = sum(stats.succeeded for stats in self._stats.values())
        return {
            "total_requests": total,
            "successful_requests": succeeded,
            "success_rate": succeeded / total if total else 0.0,
            "operations": {name: stats.snapshot() for name, stats in self._stats.items()},
            "uptime_seconds": time.time() - self.start_time,
        }

    def reset(self) -> None:
        self._stats.clear()
        self.start_time = time.time()
