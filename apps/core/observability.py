"""
Health checks for Newsdesk.

A small registry of named checks. The /health/ and /readyz/ endpoints run
every registered check and report the worst status.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health check status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    """Result of a single health check."""
    name: str
    status: HealthStatus
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0


class HealthChecker:
    """
    Health check registry and executor.
    """

    _instance = None
    _lock = Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._checks = {}
        return cls._instance

    def register(self, name: str, check_fn: Callable[[], HealthCheckResult]) -> None:
        """
        Register a health check.

        Args:
            name: Unique check name.
            check_fn: Function that returns HealthCheckResult.
        """
        self._checks[name] = check_fn

    def check(self, name: str) -> HealthCheckResult:
        """Run a specific health check."""
        if name not in self._checks:
            return HealthCheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                message=f"Unknown check: {name}",
                details={"available": self.list_checks()},
            )

        start = time.perf_counter()
        try:
            result = self._checks[name]()
        except Exception as e:
            logger.exception("Health check %s raised", name)
            result = HealthCheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                message=str(e),
            )
        result.duration_ms = (time.perf_counter() - start) * 1000
        return result

    def check_all(self) -> Dict[str, Any]:
        """Run all health checks."""
        results = {}
        overall_status = HealthStatus.HEALTHY

        for name in self._checks:
            result = self.check(name)
            results[name] = {
                "status": result.status.value,
                "message": result.message,
                "details": result.details,
                "duration_ms": round(result.duration_ms, 2),
            }

            if result.status == HealthStatus.UNHEALTHY:
                overall_status = HealthStatus.UNHEALTHY
            elif result.status == HealthStatus.DEGRADED and overall_status != HealthStatus.UNHEALTHY:
                overall_status = HealthStatus.DEGRADED

        return {
            "status": overall_status.value,
            "checks": results,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def list_checks(self) -> List[str]:
        """List registered check names."""
        return list(self._checks.keys())


health_checker = HealthChecker()


# =============================================================================
# Built-in Health Checks
# =============================================================================

def check_database() -> HealthCheckResult:
    """Check database connectivity."""
    from django.db import connection

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return HealthCheckResult(
            name="database",
            status=HealthStatus.HEALTHY,
            message="Database connection successful",
        )
    except Exception as e:
        return HealthCheckResult(
            name="database",
            status=HealthStatus.UNHEALTHY,
            message=f"Database error: {e}",
        )


def check_cache() -> HealthCheckResult:
    """
    Check the cache backend (Redis in production).

    A broken cache only slows public pages down, so failures are DEGRADED.
    """
    try:
        from django.core.cache import cache
        cache.set("health_check", "ok", 10)
        value = cache.get("health_check")

        if value == "ok":
            return HealthCheckResult(
                name="cache",
                status=HealthStatus.HEALTHY,
                message="Cache round-trip successful",
            )
        return HealthCheckResult(
            name="cache",
            status=HealthStatus.DEGRADED,
            message="Cache get/set mismatch",
        )
    except Exception as e:
        return HealthCheckResult(
            name="cache",
            status=HealthStatus.DEGRADED,
            message=f"Cache error: {e}",
        )


def check_promotion_locks() -> HealthCheckResult:
    """Both promotion lock rows are created by the articles migration."""
    from apps.articles.models import PromotionLock

    present = set(PromotionLock.objects.values_list('name', flat=True))
    missing = sorted(set(PromotionLock.Name.values) - present)
    if missing:
        return HealthCheckResult(
            name="promotion_locks",
            status=HealthStatus.UNHEALTHY,
            message="Missing promotion lock rows; run migrations",
            details={"missing": missing},
        )
    return HealthCheckResult(
        name="promotion_locks",
        status=HealthStatus.HEALTHY,
        message="Promotion locks present",
    )


def register_default_checks():
    """Register default health checks."""
    health_checker.register("database", check_database)
    health_checker.register("cache", check_cache)
    health_checker.register("promotion_locks", check_promotion_locks)
