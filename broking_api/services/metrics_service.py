"""Business metrics service for OpenTelemetry instrumentation.

Provides custom metrics for the portfolio ledger:
- Counters for ledger mutations and recorded trades
- A histogram for mutation durations
- Consistent tagging with entity, operation and status
"""
import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache, wraps
from typing import Any, Callable, Generator

from opentelemetry import metrics

# Meter for business metrics
_meter = metrics.get_meter("StockBroking.Ledger", "1.0.0")

# Counters
_ledger_mutations_total = _meter.create_counter(
    name="ledger_mutations_total",
    description="Total number of instrument/goal mutations (create/update/delete)",
    unit="1"
)

_trades_total = _meter.create_counter(
    name="trades_total",
    description="Total number of buy/sell requests by outcome",
    unit="1"
)

# Histograms for duration tracking
_ledger_mutation_duration = _meter.create_histogram(
    name="ledger_mutation_duration_seconds",
    description="Duration of ledger mutation operations in seconds",
    unit="s"
)


@dataclass
class MutationOutcome:
    """Outcome of a tracked mutation; services set ``status`` on failure."""
    status: str = "success"


class MetricsService:
    """Service for recording business metrics."""

    def increment_ledger_mutations(
        self,
        entity: str,
        operation: str,
        status: str = "success"
    ) -> None:
        """Increment ledger mutation counter."""
        _ledger_mutations_total.add(
            1, {"entity": entity, "operation": operation, "status": status}
        )

    def record_ledger_mutation_duration(
        self,
        duration_seconds: float,
        entity: str,
        operation: str,
        status: str = "success"
    ) -> None:
        """Record ledger mutation duration."""
        _ledger_mutation_duration.record(
            duration_seconds,
            {"entity": entity, "operation": operation, "status": status}
        )

    def increment_trades(self, transaction_type: str, status: str = "success") -> None:
        """Increment trade counter (BUY/SELL)."""
        _trades_total.add(1, {"transaction_type": transaction_type, "status": status})

    @contextmanager
    def track_ledger_mutation(
        self,
        entity: str,
        operation: str
    ) -> Generator[MutationOutcome, None, None]:
        """Context manager for tracking ledger mutation metrics."""
        outcome = MutationOutcome()
        start_time = time.perf_counter()
        try:
            yield outcome
        except Exception:
            outcome.status = "error"
            raise
        finally:
            duration = time.perf_counter() - start_time
            self.increment_ledger_mutations(entity, operation, outcome.status)
            self.record_ledger_mutation_duration(
                duration, entity, operation, outcome.status
            )


@lru_cache()
def get_metrics_service() -> MetricsService:
    """Get singleton metrics service instance."""
    return MetricsService()


def tracked_mutation(entity: str, operation: str) -> Callable:
    """
    Decorate an async service method returning a ServiceResult so that its
    count and duration are recorded. A failed result is tagged with its
    error code; a raised exception is tagged "error".
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any):
            with get_metrics_service().track_ledger_mutation(entity, operation) as outcome:
                result = await func(*args, **kwargs)
                if not result.success:
                    outcome.status = result.error_code.value
                return result
        return wrapper
    return decorator
