# courtslot/services/base.py
"""
Shared plumbing for the booking services.

Every service owns its session's transaction boundary: repositories flush,
services commit. Operations are timed per service class so slow calendar
or analytics queries show up in the logs and in the Prometheus
service-operation histogram.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class OperationMetrics:
    """Running timings for one named operation."""

    count: int = 0
    total_time: float = 0.0
    success_count: int = 0
    failure_count: int = 0
    min_time: float = float("inf")
    max_time: float = 0.0

    def record(self, elapsed: float, success: bool) -> None:
        self.count += 1
        self.total_time += elapsed
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        if success:
            self.success_count += 1
        else:
            self.failure_count += 1

    def summary(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "avg_time": self.total_time / self.count,
            "min_time": self.min_time,
            "max_time": self.max_time,
            "total_time": self.total_time,
            "success_rate": self.success_count / self.count,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
        }


class BaseService:
    """
    Base class for the booking services.

    Attributes:
        db: Session shared with the service's repositories
        settings: Engine settings (page sizes, timezone, conflict policy)
        logger: Logger named after the concrete service class
    """

    # service class name -> operation name -> timings
    _class_metrics: Dict[str, Dict[str, OperationMetrics]] = {}

    def __init__(self, db: Session, config: Optional[Settings] = None):
        self.db = db
        self.settings = config or default_settings
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit everything written inside the block, or roll all of it back.

        Database failures surface as ServiceException; domain errors raised
        inside the block propagate unchanged after the rollback.

        Usage:
            with self.transaction():
                booking = self.booking_repository.create_with_slots(...)
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed, rolling back: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}")
        except Exception as e:
            self.logger.warning(f"Rolling back after {e.__class__.__name__}: {str(e)}")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Time every call of a service method under ``operation_name``.

        Usage:
            @BaseService.measure_operation("bookings.create")
            def create_booking(self, facility_id, data):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args, **kwargs):
                with self.measure_operation_context(operation_name):
                    return func(self, *args, **kwargs)

            return cast(F, wrapper)

        return decorator

    @contextmanager
    def measure_operation_context(self, operation_name: str) -> Iterator[None]:
        start_time = time.time()
        success = False
        error_type: Optional[str] = None
        try:
            yield
            success = True
        except Exception as e:
            error_type = e.__class__.__name__
            raise
        finally:
            elapsed = time.time() - start_time
            self._record_metric(operation_name, elapsed, success)
            prometheus_metrics.record_service_operation(
                service=self.__class__.__name__,
                operation=operation_name,
                duration=elapsed,
                status="success" if success else "error",
                error_type=error_type,
            )
            if elapsed > self.settings.slow_operation_seconds:
                self.logger.warning(
                    f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                )

    def log_operation(self, operation: str, **context) -> None:
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        operations = BaseService._class_metrics.setdefault(self.__class__.__name__, {})
        operations.setdefault(operation, OperationMetrics()).record(elapsed, success)

    def get_metrics(self) -> Dict[str, Dict[str, Any]]:
        """Timings of this service's operations, keyed by operation name."""
        operations = BaseService._class_metrics.get(self.__class__.__name__, {})
        return {name: data.summary() for name, data in operations.items() if data.count}

    def reset_metrics(self) -> None:
        BaseService._class_metrics.pop(self.__class__.__name__, None)
        self.logger.info(f"Metrics reset for {self.__class__.__name__}")
