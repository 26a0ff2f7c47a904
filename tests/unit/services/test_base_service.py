from unittest.mock import Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

from courtslot.core.config import Settings
from courtslot.core.exceptions import ServiceException, ValidationException
from courtslot.monitoring.prometheus_metrics import REGISTRY
from courtslot.services.base import BaseService, OperationMetrics


class _TimedService(BaseService):
    @BaseService.measure_operation("timed_op")
    def timed_op(self, fail: bool = False) -> str:
        if fail:
            raise ValidationException("nope")
        return "done"


@pytest.mark.unit
class TestBaseService:
    def test_transaction_commits(self) -> None:
        db = Mock()
        service = BaseService(db)

        with service.transaction():
            pass

        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_transaction_wraps_sqlalchemy_errors(self) -> None:
        db = Mock()
        service = BaseService(db)

        with pytest.raises(ServiceException, match="Database operation failed"):
            with service.transaction():
                raise OperationalError("SELECT 1", {}, Exception("gone"))

        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_transaction_reraises_domain_errors(self) -> None:
        db = Mock()
        service = BaseService(db)

        with pytest.raises(ValidationException):
            with service.transaction():
                raise ValidationException("bad input")

        db.rollback.assert_called_once()

    def test_measure_operation_records_success_and_failure(self) -> None:
        service = _TimedService(Mock())

        assert service.timed_op() == "done"
        with pytest.raises(ValidationException):
            service.timed_op(fail=True)

        metrics = service.get_metrics()["timed_op"]
        assert metrics["count"] == 2
        assert metrics["success_count"] == 1
        assert metrics["failure_count"] == 1
        assert metrics["success_rate"] == 0.5

    def test_measure_operation_logs_slow(self) -> None:
        service = _TimedService(Mock())

        with patch("courtslot.services.base.time.time", side_effect=[0.0, 2.0]):
            with patch.object(service.logger, "warning") as mock_warning:
                assert service.timed_op() == "done"

        mock_warning.assert_called_once()

    def test_slow_threshold_comes_from_settings(self) -> None:
        service = _TimedService(Mock(), config=Settings(slow_operation_seconds=5.0))

        with patch("courtslot.services.base.time.time", side_effect=[0.0, 2.0]):
            with patch.object(service.logger, "warning") as mock_warning:
                service.timed_op()

        mock_warning.assert_not_called()

    def test_measure_operation_context_records_failure(self) -> None:
        service = BaseService(Mock())

        with pytest.raises(RuntimeError):
            with service.measure_operation_context("explode"):
                raise RuntimeError("boom")

        assert service.get_metrics()["explode"]["failure_count"] == 1

    def test_reset_metrics(self) -> None:
        service = _TimedService(Mock())
        service.timed_op()

        service.reset_metrics()

        assert service.get_metrics() == {}

    def test_log_operation_passes_context(self) -> None:
        service = BaseService(Mock())

        with patch.object(service.logger, "info") as mock_info:
            service.log_operation("create_booking", court_id="c1")

        mock_info.assert_called_once_with(
            "Operation: create_booking",
            extra={"operation": "create_booking", "court_id": "c1"},
        )


@pytest.mark.unit
class TestOperationMetrics:
    def test_summary_tracks_extremes(self) -> None:
        metrics = OperationMetrics()
        metrics.record(0.5, True)
        metrics.record(1.5, False)

        summary = metrics.summary()

        assert summary["avg_time"] == 1.0
        assert summary["min_time"] == 0.5
        assert summary["max_time"] == 1.5
        assert summary["success_rate"] == 0.5

    def test_unused_operations_are_not_reported(self) -> None:
        service = BaseService(Mock())
        BaseService._class_metrics["BaseService"] = {"idle": OperationMetrics()}

        assert service.get_metrics() == {}


@pytest.mark.unit
class TestPrometheusServiceMetrics:
    @staticmethod
    def _sample(name: str, **labels: str) -> float:
        return REGISTRY.get_sample_value(name, labels) or 0.0

    def test_success_is_exported(self) -> None:
        labels = {"service": "_TimedService", "operation": "timed_op"}
        total = "courtslot_service_operations_total"
        observed = "courtslot_service_operation_duration_seconds_count"
        before_count = self._sample(total, status="success", **labels)
        before_observed = self._sample(observed, **labels)

        _TimedService(Mock()).timed_op()

        assert self._sample(total, status="success", **labels) == before_count + 1
        assert self._sample(observed, **labels) == before_observed + 1

    def test_failure_is_exported_with_error_type(self) -> None:
        labels = {"service": "_TimedService", "operation": "timed_op"}
        before_errors = self._sample(
            "courtslot_errors_total", error_type="ValidationException", **labels
        )
        before_failed = self._sample("courtslot_service_operations_total", status="error", **labels)

        with pytest.raises(ValidationException):
            _TimedService(Mock()).timed_op(fail=True)

        assert (
            self._sample("courtslot_errors_total", error_type="ValidationException", **labels)
            == before_errors + 1
        )
        assert (
            self._sample("courtslot_service_operations_total", status="error", **labels)
            == before_failed + 1
        )
