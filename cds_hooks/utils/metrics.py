# -*- coding: utf-8 -*-
"""
In-process service metrics.

Counters are kept in memory for the lifetime of the process and exposed on
``/metrics``. Nothing here ever feeds back into card generation.
"""

import math
import threading
import time
from collections import deque
from typing import Any, Deque, Dict, List, Tuple

__all__ = ["ServiceMetrics", "metrics"]

# Rolling window of response times kept for percentiles
MAX_RESPONSE_TIMES = 1000


def _percentile(sorted_values: List[float], p: float) -> float:
    if not sorted_values:
        return 0.0
    index = math.ceil((p / 100.0) * len(sorted_values)) - 1
    return sorted_values[max(0, index)]


class ServiceMetrics:
    def __init__(self, window: int = MAX_RESPONSE_TIMES):
        self._lock = threading.Lock()
        self._window = window
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._start = time.monotonic()
            self._requests: Dict[str, int] = {}
            self._errors: Dict[str, int] = {}
            self._cards: Dict[str, int] = {"critical": 0, "warning": 0, "info": 0}
            self._times: Deque[Tuple[str, float]] = deque(maxlen=self._window)

    def record_request(self, hook: str) -> None:
        with self._lock:
            self._requests[hook] = self._requests.get(hook, 0) + 1

    def record_response_time(self, hook: str, duration_ms: float) -> None:
        with self._lock:
            self._times.append((hook, duration_ms))

    def record_cards(self, critical: int = 0, warning: int = 0, info: int = 0) -> None:
        with self._lock:
            self._cards["critical"] += critical
            self._cards["warning"] += warning
            self._cards["info"] += info

    def record_error(self, error_type: str) -> None:
        with self._lock:
            self._errors[error_type] = self._errors.get(error_type, 0) + 1

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            times = list(self._times)
            requests = dict(self._requests)
            errors = dict(self._errors)
            cards = dict(self._cards)
            uptime = time.monotonic() - self._start

        durations = sorted(d for _, d in times)
        by_hook: Dict[str, List[float]] = {}
        for hook, d in times:
            by_hook.setdefault(hook, []).append(d)

        return {
            "uptime": int(uptime),
            "requests": {"total": sum(requests.values()), "byHook": requests},
            "responseTimes": {
                "average": round(sum(durations) / len(durations), 2) if durations else 0.0,
                "p50": _percentile(durations, 50),
                "p95": _percentile(durations, 95),
                "p99": _percentile(durations, 99),
                "byHook": {
                    hook: {"average": round(sum(ds) / len(ds), 2), "count": len(ds)}
                    for hook, ds in by_hook.items()
                },
            },
            "cards": {"total": sum(cards.values()), "byIndicator": cards},
            "errors": {"total": sum(errors.values()), "byType": errors},
        }


# Singleton instance
metrics = ServiceMetrics()
