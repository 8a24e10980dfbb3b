"""Error tracking and alerting for assistant and basket failures."""
from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional
import time

from storefront.analytics.logger import logger

# Errors per alert window before a warning is logged
ERROR_THRESHOLDS = {
    "completion_error": 3,
    "tool_error": 5,
    "basket_error": 5,
    "checkout_error": 2,
}


class ErrorTracker:
    """Keep a bounded, time-limited history of failures and alert on bursts."""

    def __init__(
        self,
        thresholds: Optional[Dict[str, int]] = None,
        window_seconds: int = 60,
        retention_seconds: int = 3600,
        max_history: int = 1000,
    ):
        self.thresholds = dict(ERROR_THRESHOLDS if thresholds is None else thresholds)
        self.window_seconds = window_seconds
        self.retention_seconds = retention_seconds
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.error_history: Deque[Dict[str, Any]] = deque(maxlen=max_history)

    def record_error(
        self,
        error_type: str,
        error_message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Record a failure. Returns True when its type is over the alert threshold."""
        now = time.time()
        self.error_history.append(
            {
                "timestamp": now,
                "type": error_type,
                "message": error_message,
                "context": context or {},
            }
        )
        self.error_counts[error_type] += 1
        self._prune(now)

        logger.error(f"Error recorded: {error_type} - {error_message} {context or ''}".rstrip())
        return self._check_alert(error_type, now)

    def _prune(self, now: float) -> None:
        cutoff = now - self.retention_seconds
        while self.error_history and self.error_history[0]["timestamp"] <= cutoff:
            self.error_history.popleft()

    def _count_since(self, since: float, error_type: Optional[str] = None) -> int:
        return sum(
            1
            for e in self.error_history
            if e["timestamp"] > since and (error_type is None or e["type"] == error_type)
        )

    def _check_alert(self, error_type: str, now: float) -> bool:
        threshold = self.thresholds.get(error_type)
        if not threshold:
            return False
        recent = self._count_since(now - self.window_seconds, error_type)
        if recent >= threshold:
            logger.warning(
                f"ALERT: {error_type} threshold exceeded - {recent} errors in last {self.window_seconds}s"
            )
            return True
        return False

    def get_error_stats(self, window_seconds: int = 300) -> Dict[str, Any]:
        """Error counts by type for the last ``window_seconds``."""
        now = time.time()
        cutoff = now - window_seconds
        error_types: Dict[str, int] = defaultdict(int)
        for error in self.error_history:
            if error["timestamp"] > cutoff:
                error_types[error["type"]] += 1

        total = sum(error_types.values())
        alerting = sorted(
            error_type
            for error_type, threshold in self.thresholds.items()
            if self._count_since(now - self.window_seconds, error_type) >= threshold
        )
        return {
            "window_seconds": window_seconds,
            "total_errors": total,
            "error_types": dict(error_types),
            "error_rate": total / (window_seconds / 60) if window_seconds > 0 else 0,  # per minute
            "alerting": alerting,
        }

    def get_recent_errors(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent errors first."""
        return list(reversed(self.error_history))[:limit]


# Global error tracker instance
error_tracker = ErrorTracker()
